from datetime import datetime

from pydantic import BaseModel


class UserProfile(BaseModel):
    """Per-request view of a Farcaster account."""

    fid: int
    created_at: datetime | None = None
    display_name: str | None = None
    username: str | None = None
    profile_image: str | None = None


class FarcasterUserResponse(BaseModel):
    fid: int
    created_at: datetime
    created_at_timestamp: int
    join_date: str
    display_name: str | None = None
    username: str | None = None
    profile_image: str | None = None
