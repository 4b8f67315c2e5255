import logging
from io import BytesIO

from PIL import Image, ImageDraw, ImageFont

from app.schemas.image import ImageParams

from .base import (
    CARD_HEIGHT,
    CARD_WIDTH,
    INITIAL_HEADLINE,
    RESULT_HEADLINE,
    Renderer,
    result_lines,
)

logger = logging.getLogger(__name__)

BACKGROUND = (18, 18, 24)
PANEL = (40, 32, 64)
ACCENT = (0, 174, 228)
TEXT = (255, 255, 255)
ERROR_TEXT = (239, 68, 68)


class PillowRenderer(Renderer):
    """Draws PNG cards with Pillow."""

    media_type = "image/png"

    def __init__(self, font_path: str | None = None):
        self._font_path = font_path

    def _font(self, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        if self._font_path:
            return ImageFont.truetype(self._font_path, size)
        return ImageFont.load_default(size=size)

    def _centered(self, draw: ImageDraw.ImageDraw, y: int, text: str, size: int, fill) -> int:
        """Draw one centered line and return the y of the next line."""
        font = self._font(size)
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        x = (CARD_WIDTH - (right - left)) // 2
        draw.text((x, y), text, font=font, fill=fill)
        return y + (bottom - top) + size // 2

    def _render(self, params: ImageParams) -> bytes:
        img = Image.new("RGB", (CARD_WIDTH, CARD_HEIGHT), BACKGROUND)
        draw = ImageDraw.Draw(img)
        draw.rounded_rectangle((50, 50, CARD_WIDTH - 50, CARD_HEIGHT - 50), radius=6, fill=PANEL)

        if params.is_initial:
            self._centered(draw, CARD_HEIGHT // 2 - 24, INITIAL_HEADLINE, 48, TEXT)
        elif params.is_error:
            self._centered(draw, CARD_HEIGHT // 2 - 16, params.error_message, 32, ERROR_TEXT)
        else:
            y = self._centered(draw, 130, RESULT_HEADLINE, 60, ACCENT)
            for line in result_lines(params):
                y = self._centered(draw, y, line, 32, TEXT)

        buf = BytesIO()
        img.save(buf, format="PNG")
        logger.debug("Rendered %dx%d PNG for fid=%s", CARD_WIDTH, CARD_HEIGHT, params.fid or "-")
        return buf.getvalue()
