"""Rendering interface shared by all image backends."""

import base64
import logging
from abc import ABC, abstractmethod

from app.schemas.image import ImageParams
from app.services.farcaster.errors import ErrorKind

logger = logging.getLogger(__name__)

CARD_WIDTH = 1200
CARD_HEIGHT = 630

INITIAL_HEADLINE = "Check Your Farcaster Anniversary"
RESULT_HEADLINE = "Your Farcaster Journey"

# 1x1 transparent PNG served when a backend fails
PLACEHOLDER_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
PLACEHOLDER_MEDIA_TYPE = "image/png"


class RenderFailure(Exception):
    """A backend could not produce an image."""

    kind = ErrorKind.RENDER_FAILURE


class Renderer(ABC):
    """Pure function of ImageParams to image bytes."""

    media_type: str

    def render(self, params: ImageParams) -> bytes:
        """Render a card, wrapping any backend error in RenderFailure."""
        try:
            return self._render(params)
        except RenderFailure:
            raise
        except Exception as e:
            logger.exception("%s failed to render image", type(self).__name__)
            raise RenderFailure(str(e)) from e

    @abstractmethod
    def _render(self, params: ImageParams) -> bytes: ...


def result_lines(params: ImageParams) -> list[str]:
    """Text lines of the result card below the headline."""
    lines = []
    if params.username:
        lines.append(f"@{params.username}")
    if params.awesome_text:
        lines.append(params.awesome_text)
    lines.append(f"Genesis Day: {params.join_date}")
    lines.append(f"My Farcaster Age: {params.anniversary}")
    return lines
