"""Pydantic schemas for the Farcaster Frame protocol."""

import logging
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

logger = logging.getLogger(__name__)


class FrameState(str, Enum):
    """Frame states; the current one travels in the post URL."""

    INITIAL = "initial"
    RESULT = "result"
    ERROR = "error"


class ButtonAction(str, Enum):
    POST = "post"
    LINK = "link"


class FrameButton(BaseModel):
    label: str
    action: ButtonAction = ButtonAction.POST
    target: str | None = None


class FrameResponse(BaseModel):
    """Outbound frame metadata."""

    model_config = ConfigDict(populate_by_name=True)

    state: FrameState
    image: str
    buttons: list[FrameButton] = Field(..., min_length=1, max_length=4)
    title: str
    description: str
    og_image: str = Field(..., alias="ogImage")
    post_url: str = Field(..., alias="postUrl")


class UntrustedData(BaseModel):
    """Client-asserted part of a frame action. Not verified.

    Fields that fail validation are dropped to None; ``fid`` is kept as
    sent and checked by the resolver.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    fid: Any = None
    button_index: int | None = Field(default=None, alias="buttonIndex")
    url: str | None = None
    timestamp: int | None = None
    cast_id: dict[str, Any] | None = Field(default=None, alias="castId")

    @field_validator("button_index", "url", "timestamp", "cast_id", mode="wrap")
    @classmethod
    def drop_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            logger.debug("Ignoring malformed frame action field: %r", value)
            return None


class TrustedData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    message_bytes: str | None = Field(default=None, alias="messageBytes")

    @field_validator("message_bytes", mode="wrap")
    @classmethod
    def drop_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None


class FrameActionRequest(BaseModel):
    """Inbound frame action envelope."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    untrusted_data: UntrustedData | None = Field(default=None, alias="untrustedData")
    trusted_data: TrustedData | None = Field(default=None, alias="trustedData")

    @field_validator("untrusted_data", "trusted_data", mode="wrap")
    @classmethod
    def drop_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            logger.debug("Ignoring malformed frame action envelope part: %r", value)
            return None

    @classmethod
    def from_payload(cls, payload: Any) -> "FrameActionRequest":
        """Build a request from any decoded JSON body; non-objects become empty."""
        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(payload)

    @property
    def fid(self) -> Any:
        return self.untrusted_data.fid if self.untrusted_data else None

    @property
    def button_index(self) -> int | None:
        return self.untrusted_data.button_index if self.untrusted_data else None
