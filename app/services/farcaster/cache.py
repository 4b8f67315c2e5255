"""Optional best-effort profile caches.

A cache is never required for correctness. When one is injected into the
resolver, entries expire after a fixed TTL and callers clear them
explicitly when fresh data is wanted.
"""

import logging
from time import monotonic
from typing import Protocol

from pydantic import ValidationError
from upstash_redis.asyncio import Redis

from app.schemas.user import UserProfile

logger = logging.getLogger(__name__)


class ProfileCache(Protocol):
    async def get(self, fid: int) -> UserProfile | None: ...

    async def set(self, profile: UserProfile) -> None: ...

    async def clear(self, fid: int | None = None) -> None: ...


class MemoryProfileCache:
    """Process-local cache with TTL-based expiry."""

    def __init__(self, ttl_seconds: int = 300):
        self.ttl_seconds = ttl_seconds
        self._entries: dict[int, tuple[float, UserProfile]] = {}

    async def get(self, fid: int) -> UserProfile | None:
        entry = self._entries.get(fid)
        if entry is None:
            return None
        stored_at, profile = entry
        if monotonic() - stored_at >= self.ttl_seconds:
            del self._entries[fid]
            return None
        return profile

    async def set(self, profile: UserProfile) -> None:
        self._entries[profile.fid] = (monotonic(), profile)

    async def clear(self, fid: int | None = None) -> None:
        if fid is None:
            self._entries.clear()
            logger.info("Entire profile cache cleared")
        else:
            self._entries.pop(fid, None)
            logger.info("Profile cache cleared for FID %s", fid)


class RedisProfileCache:
    """Upstash Redis cache; entries expire via Redis TTL."""

    KEY_PREFIX = "fc-anniversary:profile:"

    def __init__(self, redis_client: Redis, ttl_seconds: int = 300):
        self._redis = redis_client
        self.ttl_seconds = ttl_seconds

    def _key(self, fid: int) -> str:
        return f"{self.KEY_PREFIX}{fid}"

    async def get(self, fid: int) -> UserProfile | None:
        raw = await self._redis.get(self._key(fid))
        if raw is None:
            return None
        try:
            return UserProfile.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding malformed cache entry for FID %s: %s", fid, e)
            await self._redis.delete(self._key(fid))
            return None

    async def set(self, profile: UserProfile) -> None:
        await self._redis.set(
            self._key(profile.fid),
            profile.model_dump_json(),
            ex=self.ttl_seconds,
        )

    async def clear(self, fid: int | None = None) -> None:
        if fid is not None:
            await self._redis.delete(self._key(fid))
            logger.info("Profile cache cleared for FID %s", fid)
            return

        cursor = 0
        while True:
            cursor, keys = await self._redis.scan(cursor, match=f"{self.KEY_PREFIX}*")
            if keys:
                await self._redis.delete(*keys)
            if cursor == 0:
                break
        logger.info("Entire profile cache cleared")
