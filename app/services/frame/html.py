"""HTML page carrying frame metadata as meta tags."""

from html import escape

from app.schemas.frame import ButtonAction, FrameResponse

FRAME_VERSION = "vNext"
IMAGE_ASPECT_RATIO = "1.91:1"


def frame_meta_tags(frame: FrameResponse) -> list[tuple[str, str]]:
    """(property, content) pairs in the order clients expect them."""
    tags = [
        ("fc:frame", FRAME_VERSION),
        ("fc:frame:image", frame.image),
        ("fc:frame:image:aspect_ratio", IMAGE_ASPECT_RATIO),
        ("fc:frame:post_url", frame.post_url),
    ]
    for index, button in enumerate(frame.buttons, start=1):
        prefix = f"fc:frame:button:{index}"
        tags.append((prefix, button.label))
        tags.append((f"{prefix}:action", button.action.value))
        if button.action == ButtonAction.LINK and button.target:
            tags.append((f"{prefix}:target", button.target))
    tags.extend(
        [
            ("og:title", frame.title),
            ("og:description", frame.description),
            ("og:image", frame.og_image),
        ]
    )
    return tags


def render_frame_html(frame: FrameResponse) -> str:
    meta = "\n".join(
        f'    <meta property="{escape(prop)}" content="{escape(content)}" />'
        for prop, content in frame_meta_tags(frame)
    )
    return (
        "<!DOCTYPE html>\n"
        "<html lang=\"en\">\n"
        "  <head>\n"
        '    <meta charset="utf-8" />\n'
        f"    <title>{escape(frame.title)}</title>\n"
        f"{meta}\n"
        "  </head>\n"
        "  <body>\n"
        f"    <h1>{escape(frame.title)}</h1>\n"
        f"    <p>{escape(frame.description)}</p>\n"
        "  </body>\n"
        "</html>\n"
    )
