"""Frame action handling: resolve, calculate, build."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from app.schemas.frame import FrameActionRequest, FrameResponse, FrameState
from app.services.anniversary import compute_duration
from app.services.farcaster import ResolutionError, UserDataResolver, parse_identifier

from .builder import FrameResponseBuilder, FrameStep, next_step

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FrameService:
    """Runs one frame action through the resolver, calculator and builder.

    Any failure becomes the error frame; nothing raised here reaches the
    caller.
    """

    def __init__(
        self,
        resolver: UserDataResolver,
        builder: FrameResponseBuilder,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._resolver = resolver
        self._builder = builder
        self._clock = clock

    async def handle(self, action: FrameActionRequest, state: FrameState) -> FrameResponse:
        step = next_step(state, action.button_index)
        logger.info(
            "Frame action: state=%s button=%s fid=%s step=%s",
            state.value,
            action.button_index,
            action.fid,
            step.value,
        )

        if step == FrameStep.SHOW_INITIAL:
            return self._builder.initial()

        try:
            if step == FrameStep.REFRESH:
                await self._resolver.clear_cache(parse_identifier(action.fid))

            profile = await self._resolver.resolve(action.fid)
            duration = compute_duration(profile.created_at, self._clock())
            logger.info("FID %s anniversary: %s", profile.fid, duration.label)
            return self._builder.build(profile=profile, duration=duration)
        except ResolutionError as e:
            logger.warning("Frame resolution failed (%s): %s", e.kind.value, e.detail)
            return self._builder.build(error=e)
        except Exception as e:
            logger.exception("Unexpected error handling frame action")
            return self._builder.build(error=e)
