from app.services.farcaster.cache import MemoryProfileCache, ProfileCache, RedisProfileCache
from app.services.farcaster.errors import ErrorKind, ResolutionError
from app.services.farcaster.resolver import UserDataResolver, parse_identifier

__all__ = [
    "ErrorKind",
    "MemoryProfileCache",
    "ProfileCache",
    "RedisProfileCache",
    "ResolutionError",
    "UserDataResolver",
    "parse_identifier",
]
