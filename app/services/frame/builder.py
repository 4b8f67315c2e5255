"""Frame response construction.

The builder never renders pixels. Images are referenced by URL to the
/api/og route with every parameter needed to reproduce the card.
"""

import logging
from enum import Enum
from urllib.parse import urlencode

from app.schemas.frame import ButtonAction, FrameButton, FrameResponse, FrameState
from app.schemas.image import ImageParams
from app.schemas.user import UserProfile
from app.services.anniversary import (
    AnniversaryDuration,
    NotYetJoined,
    classify_tier,
    format_join_date,
)
from app.services.farcaster.errors import UNEXPECTED_ERROR_MESSAGE, ResolutionError

logger = logging.getLogger(__name__)

WARPCAST_COMPOSE_URL = "https://warpcast.com/~/compose"

INITIAL_TITLE = "Check Your Farcaster Anniversary"
INITIAL_DESCRIPTION = "Find out when you joined Farcaster and how long you've been a member!"
RESULT_TITLE = "My Farcaster Anniversary"
ERROR_TITLE = "Farcaster Anniversary Frame Error"
ERROR_DESCRIPTION = "An error occurred while processing your Farcaster anniversary information."

# 1-based button positions in the result frame
SHARE_BUTTON = 1
CHECK_AGAIN_BUTTON = 2
HOME_BUTTON = 3


class FrameStep(str, Enum):
    """What the server does in response to a submitted button."""

    SHOW_INITIAL = "show_initial"
    RESOLVE = "resolve"
    REFRESH = "refresh"


def next_step(state: FrameState, button_index: int | None) -> FrameStep:
    """Transition for a button pressed on a frame in ``state``.

    Only the result frame has more than one submit button: Check Again
    re-resolves with fresh data and Home returns to the initial frame.
    Every other submission resolves the account.
    """
    if state == FrameState.RESULT:
        if button_index == HOME_BUTTON:
            return FrameStep.SHOW_INITIAL
        if button_index == CHECK_AGAIN_BUTTON:
            return FrameStep.REFRESH
    return FrameStep.RESOLVE


def share_text(join_date: str, anniversary: str) -> str:
    return (
        f"I joined Farcaster on {join_date} and have been a member for {anniversary}! "
        "Check your Farcaster anniversary: "
    )


class FrameResponseBuilder:
    """Assembles FrameResponse objects for each frame state."""

    def __init__(self, app_url: str):
        self.app_url = app_url.rstrip("/")

    @property
    def frames_url(self) -> str:
        return f"{self.app_url}/frames"

    def image_url(self, params: ImageParams) -> str:
        return f"{self.app_url}/api/og?{urlencode(params.to_query())}"

    def post_url(self, state: FrameState) -> str:
        return f"{self.frames_url}?{urlencode({'state': state.value})}"

    def share_url(self, join_date: str, anniversary: str) -> str:
        query = urlencode({"text": share_text(join_date, anniversary), "embeds[]": self.frames_url})
        return f"{WARPCAST_COMPOSE_URL}?{query}"

    def _frame(
        self,
        state: FrameState,
        params: ImageParams,
        buttons: list[FrameButton],
        title: str,
        description: str,
    ) -> FrameResponse:
        image = self.image_url(params)
        return FrameResponse(
            state=state,
            image=image,
            buttons=buttons,
            title=title,
            description=description,
            og_image=image,
            post_url=self.post_url(state),
        )

    def initial(self) -> FrameResponse:
        return self._frame(
            FrameState.INITIAL,
            ImageParams(is_initial=True),
            [FrameButton(label="Check Anniversary")],
            INITIAL_TITLE,
            INITIAL_DESCRIPTION,
        )

    def result(
        self, profile: UserProfile, duration: AnniversaryDuration | NotYetJoined
    ) -> FrameResponse:
        if profile.created_at is None:
            raise ValueError(f"profile for FID {profile.fid} has no creation time")

        join_date = format_join_date(profile.created_at)
        params = ImageParams(
            fid=str(profile.fid),
            join_date=join_date,
            anniversary=duration.label,
            awesome_text=classify_tier(profile.fid),
            username=profile.username or "",
        )
        buttons = [
            FrameButton(
                label="Share",
                action=ButtonAction.LINK,
                target=self.share_url(join_date, duration.label),
            ),
            FrameButton(label="Check Again"),
            FrameButton(label="Home"),
        ]
        return self._frame(
            FrameState.RESULT,
            params,
            buttons,
            RESULT_TITLE,
            f"I joined Farcaster on {join_date} and have been a member for {duration.label}!",
        )

    def error(self, message: str) -> FrameResponse:
        return self._frame(
            FrameState.ERROR,
            ImageParams(is_error=True, error_message=message),
            [FrameButton(label="Retry")],
            ERROR_TITLE,
            ERROR_DESCRIPTION,
        )

    def build(
        self,
        profile: UserProfile | None = None,
        duration: AnniversaryDuration | NotYetJoined | None = None,
        error: Exception | None = None,
    ) -> FrameResponse:
        """Pick the frame for whatever the pipeline produced.

        An error wins over data; data without a duration falls back to the
        initial frame.
        """
        if error is not None:
            message = error.user_message if isinstance(error, ResolutionError) else UNEXPECTED_ERROR_MESSAGE
            return self.error(message)
        if profile is not None and duration is not None:
            return self.result(profile, duration)
        return self.initial()
