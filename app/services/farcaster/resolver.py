"""Farcaster user data resolution.

Two independent sources are queried concurrently:
- Airstack social graph: display name, username and avatar (optional)
- Farcaster fname registry: transfer history; the earliest transfer is the
  account creation time (mandatory)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.config import Settings
from app.schemas.user import UserProfile
from app.services.anniversary import from_unix_timestamp

from .cache import ProfileCache
from .errors import ErrorKind, ResolutionError

logger = logging.getLogger(__name__)

SOCIAL_QUERY = """
query GetFarcasterUser($fid: String!) {
  Socials(
    input: {filter: {dappName: {_eq: farcaster}, userId: {_eq: $fid}}, blockchain: ethereum}
  ) {
    Social {
      userId
      profileName
      profileDisplayName
      profileImage
    }
  }
}
"""


@dataclass
class SocialProfile:
    """Fields read from the social graph."""

    username: str | None = None
    display_name: str | None = None
    profile_image: str | None = None


@dataclass
class Transfer:
    """One fname registry transfer event."""

    timestamp: int
    username: str | None = None


def parse_identifier(value: Any) -> int:
    """Validate an FID.

    Accepts a positive ``int`` or a string of decimal digits.

    Raises:
        ResolutionError: INVALID_IDENTIFIER for anything else.
    """
    if isinstance(value, bool):
        raise ResolutionError(ErrorKind.INVALID_IDENTIFIER, f"boolean FID {value!r}")
    if isinstance(value, int):
        fid = value
    elif isinstance(value, str) and value.strip().isdecimal():
        fid = int(value.strip())
    else:
        raise ResolutionError(ErrorKind.INVALID_IDENTIFIER, f"unparseable FID {value!r}")

    if fid <= 0:
        raise ResolutionError(ErrorKind.INVALID_IDENTIFIER, f"non-positive FID {fid}")
    return fid


def _text(value: Any) -> str | None:
    """Non-empty strings pass through; anything else is treated as missing."""
    return value if isinstance(value, str) and value else None


def earliest_transfer(transfers: list[Transfer]) -> Transfer | None:
    """Return the transfer with the smallest timestamp."""
    if not transfers:
        return None
    return sorted(transfers, key=lambda t: t.timestamp)[0]


class UserDataResolver:
    """Resolves an FID into a UserProfile.

    The HTTP client is shared and owned by the caller. An optional cache
    can be injected; it is consulted before the upstream lookups and only
    successful resolutions are stored.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Settings,
        cache: ProfileCache | None = None,
    ):
        self._http = http_client
        self._settings = settings
        self._cache = cache

    async def clear_cache(self, fid: int | None = None) -> None:
        if self._cache is None:
            return
        try:
            await self._cache.clear(fid)
        except Exception as e:
            logger.warning("Profile cache clear failed for FID %s: %s", fid, e)

    async def _cached(self, fid: int) -> UserProfile | None:
        if self._cache is None:
            return None
        try:
            return await self._cache.get(fid)
        except Exception as e:
            logger.warning("Profile cache read failed for FID %s, resolving upstream: %s", fid, e)
            return None

    async def _store(self, profile: UserProfile) -> None:
        if self._cache is None:
            return
        try:
            await self._cache.set(profile)
        except Exception as e:
            logger.warning("Profile cache write failed for FID %s: %s", profile.fid, e)

    async def resolve(self, identifier: Any) -> UserProfile:
        """Resolve an identifier into a profile.

        Raises:
            ResolutionError: INVALID_IDENTIFIER, USER_NOT_FOUND or
                UPSTREAM_UNAVAILABLE.
        """
        fid = parse_identifier(identifier)

        cached = await self._cached(fid)
        if cached is not None:
            logger.debug("Profile cache hit for FID %s", fid)
            return cached

        social_result, transfers_result = await asyncio.gather(
            self.fetch_social_profile(fid),
            self.fetch_transfers(fid),
            return_exceptions=True,
        )

        # Callers log resolution failures
        if isinstance(transfers_result, ResolutionError):
            raise transfers_result
        if isinstance(transfers_result, BaseException):
            raise ResolutionError(
                ErrorKind.UPSTREAM_UNAVAILABLE, str(transfers_result)
            ) from transfers_result

        if isinstance(social_result, BaseException):
            logger.warning(
                "Social graph lookup failed for FID %s, continuing without display name: %s",
                fid,
                social_result,
            )
            social = SocialProfile()
        else:
            social = social_result or SocialProfile()

        first = earliest_transfer(transfers_result)
        if first is None:
            logger.debug("No registry transfers for FID %s", fid)
            raise ResolutionError(ErrorKind.USER_NOT_FOUND, f"no transfers for FID {fid}")

        profile = UserProfile(
            fid=fid,
            created_at=from_unix_timestamp(first.timestamp),
            display_name=social.display_name or social.username,
            username=social.username or first.username,
            profile_image=social.profile_image,
        )
        logger.info("Resolved FID %s: created_at=%s", fid, profile.created_at)

        await self._store(profile)
        return profile

    async def fetch_transfers(self, fid: int) -> list[Transfer]:
        """Read the fname registry transfer history for an FID.

        Raises:
            ResolutionError: UPSTREAM_UNAVAILABLE on transport errors,
                timeouts, error statuses or malformed bodies.
        """
        url = f"{self._settings.FNAME_REGISTRY_URL.rstrip('/')}/transfers"
        try:
            response = await self._http.get(url, params={"fid": fid})
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise ResolutionError(ErrorKind.UPSTREAM_UNAVAILABLE, f"registry timeout: {e}") from e
        except httpx.HTTPError as e:
            raise ResolutionError(ErrorKind.UPSTREAM_UNAVAILABLE, f"registry error: {e}") from e
        except ValueError as e:
            raise ResolutionError(ErrorKind.UPSTREAM_UNAVAILABLE, f"registry sent invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ResolutionError(ErrorKind.UPSTREAM_UNAVAILABLE, "registry response is not an object")

        transfers = []
        for item in data.get("transfers") or []:
            timestamp = item.get("timestamp") if isinstance(item, dict) else None
            if not isinstance(timestamp, (int, float)) or isinstance(timestamp, bool):
                logger.debug("Skipping registry transfer without timestamp: %r", item)
                continue
            transfers.append(Transfer(timestamp=int(timestamp), username=_text(item.get("username"))))

        logger.debug("Registry returned %d transfers for FID %s", len(transfers), fid)
        return transfers

    async def fetch_social_profile(self, fid: int) -> SocialProfile | None:
        """Query the social graph. Returns None when no profile matches.

        Raises:
            httpx.HTTPError: On transport failures or error statuses.
            ValueError: When the API reports errors or returns invalid JSON.
        """
        if not self._settings.AIRSTACK_API_KEY:
            logger.debug("AIRSTACK_API_KEY not configured, skipping social lookup")
            return None

        response = await self._http.post(
            self._settings.AIRSTACK_API_URL,
            json={"query": SOCIAL_QUERY, "variables": {"fid": str(fid)}},
            headers={"Authorization": self._settings.AIRSTACK_API_KEY},
        )
        response.raise_for_status()
        payload = response.json()

        if payload.get("errors"):
            raise ValueError(f"Airstack API error: {payload['errors']}")

        socials = ((payload.get("data") or {}).get("Socials") or {}).get("Social") or []
        if not socials:
            logger.debug("No social profile for FID %s", fid)
            return None

        social = socials[0]
        return SocialProfile(
            username=_text(social.get("profileName")),
            display_name=_text(social.get("profileDisplayName")),
            profile_image=_text(social.get("profileImage")),
        )
