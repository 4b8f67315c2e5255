"""Image rendering backends.

All backends implement ``Renderer.render(params) -> bytes``; the active one
is chosen by the RENDER_BACKEND setting.
"""

from app.config import Settings

from .base import (
    PLACEHOLDER_MEDIA_TYPE,
    PLACEHOLDER_PNG,
    RenderFailure,
    Renderer,
)
from .pillow import PillowRenderer
from .svg import SvgRenderer


def get_renderer(settings: Settings) -> Renderer:
    """Build the renderer selected by configuration."""
    if settings.RENDER_BACKEND == "svg":
        return SvgRenderer()
    return PillowRenderer(font_path=settings.RENDER_FONT_PATH)


__all__ = [
    "PLACEHOLDER_MEDIA_TYPE",
    "PLACEHOLDER_PNG",
    "PillowRenderer",
    "RenderFailure",
    "Renderer",
    "SvgRenderer",
    "get_renderer",
]
