import logging

from fastapi import APIRouter, HTTPException, status

from app.dependencies.services import Resolver
from app.schemas.user import FarcasterUserResponse
from app.services.anniversary import format_join_date
from app.services.farcaster import ErrorKind, ResolutionError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])

ERROR_STATUS_MAP = {
    ErrorKind.INVALID_IDENTIFIER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UPSTREAM_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
}


@router.get("/farcaster-user", response_model=FarcasterUserResponse)
async def get_farcaster_user(resolver: Resolver, fid: str | None = None):
    """Resolve a Farcaster account's creation time and profile."""
    logger.info("GET /api/farcaster-user - fid: %s", fid)

    try:
        profile = await resolver.resolve(fid)
    except ResolutionError as e:
        logger.warning("Farcaster user lookup failed for %s: %s", fid, e)
        raise HTTPException(
            status_code=ERROR_STATUS_MAP.get(e.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
            detail=e.user_message,
        )

    return FarcasterUserResponse(
        fid=profile.fid,
        created_at=profile.created_at,
        created_at_timestamp=int(profile.created_at.timestamp()),
        join_date=format_join_date(profile.created_at),
        display_name=profile.display_name,
        username=profile.username,
        profile_image=profile.profile_image,
    )
