"""Resolution error taxonomy."""

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_IDENTIFIER = "invalid_identifier"
    USER_NOT_FOUND = "user_not_found"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    RENDER_FAILURE = "render_failure"


# Short, user-facing text per kind. Internal details only go to the logs.
USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_IDENTIFIER: "Invalid Farcaster ID",
    ErrorKind.USER_NOT_FOUND: "No Farcaster account found for this ID",
    ErrorKind.UPSTREAM_UNAVAILABLE: "Farcaster data is unavailable right now. Please retry.",
    ErrorKind.RENDER_FAILURE: "Unable to generate image",
}
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class ResolutionError(Exception):
    """Raised when an account cannot be resolved.

    Args:
        kind: Category of the failure.
        detail: Diagnostic text for logs; never shown to end users.
    """

    def __init__(self, kind: ErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES[self.kind]
