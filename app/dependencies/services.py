"""FastAPI providers for the frame pipeline.

Routes depend on these through the Annotated aliases at the bottom so tests
can swap any of them with ``app.dependency_overrides``.
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config import Settings, get_settings
from app.dependencies.http import get_http_client
from app.dependencies.redis import get_redis_client
from app.services.farcaster import (
    MemoryProfileCache,
    ProfileCache,
    RedisProfileCache,
    UserDataResolver,
)
from app.services.frame import FrameResponseBuilder, FrameService
from app.services.render import Renderer, get_renderer

logger = logging.getLogger(__name__)


@lru_cache
def get_profile_cache() -> ProfileCache | None:
    """Build the configured cache once per process, or None when disabled."""
    settings = get_settings()
    if settings.CACHE_BACKEND == "memory":
        logger.info("Using in-memory profile cache (ttl=%ss)", settings.CACHE_TTL_SECONDS)
        return MemoryProfileCache(ttl_seconds=settings.CACHE_TTL_SECONDS)
    if settings.CACHE_BACKEND == "redis":
        logger.info("Using Upstash Redis profile cache (ttl=%ss)", settings.CACHE_TTL_SECONDS)
        return RedisProfileCache(get_redis_client(), ttl_seconds=settings.CACHE_TTL_SECONDS)
    return None


def get_resolver(settings: Annotated[Settings, Depends(get_settings)]) -> UserDataResolver:
    return UserDataResolver(get_http_client(), settings, cache=get_profile_cache())


def get_frame_builder(settings: Annotated[Settings, Depends(get_settings)]) -> FrameResponseBuilder:
    return FrameResponseBuilder(settings.app_url)


def get_frame_service(
    resolver: Annotated[UserDataResolver, Depends(get_resolver)],
    builder: Annotated[FrameResponseBuilder, Depends(get_frame_builder)],
) -> FrameService:
    return FrameService(resolver, builder)


def get_image_renderer(settings: Annotated[Settings, Depends(get_settings)]) -> Renderer:
    return get_renderer(settings)


Resolver = Annotated[UserDataResolver, Depends(get_resolver)]
FrameBuilder = Annotated[FrameResponseBuilder, Depends(get_frame_builder)]
Frames = Annotated[FrameService, Depends(get_frame_service)]
ImageRenderer = Annotated[Renderer, Depends(get_image_renderer)]
