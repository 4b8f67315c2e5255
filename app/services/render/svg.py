from xml.sax.saxutils import escape

from app.schemas.image import ImageParams

from .base import (
    CARD_HEIGHT,
    CARD_WIDTH,
    INITIAL_HEADLINE,
    RESULT_HEADLINE,
    Renderer,
    result_lines,
)

STYLE = """
    .text { font-family: 'Inter', sans-serif; fill: #ffffff; }
    .title { font-size: 60px; font-weight: bold; fill: #00aee4; }
    .info { font-size: 32px; }
    .error { font-size: 32px; fill: #ef4444; }
"""


def _text(y: int, css_class: str, content: str) -> str:
    return f'<text x="50%" y="{y}" class="text {css_class}" text-anchor="middle">{escape(content)}</text>'


class SvgRenderer(Renderer):
    """Emits SVG cards; every interpolated value is XML-escaped."""

    media_type = "image/svg+xml"

    def _render(self, params: ImageParams) -> bytes:
        if params.is_initial:
            body = [_text(CARD_HEIGHT // 2, "title", INITIAL_HEADLINE)]
        elif params.is_error:
            body = [_text(CARD_HEIGHT // 2, "error", params.error_message)]
        else:
            body = [_text(150, "title", RESULT_HEADLINE)]
            body.extend(
                _text(250 + i * 80, "info", line) for i, line in enumerate(result_lines(params))
            )

        svg = (
            f'<svg width="{CARD_WIDTH}" height="{CARD_HEIGHT}" xmlns="http://www.w3.org/2000/svg">'
            f'<rect width="100%" height="100%" fill="#121218"/>'
            f'<style type="text/css">{STYLE}</style>'
            f"{''.join(body)}"
            "</svg>"
        )
        return svg.encode("utf-8")
