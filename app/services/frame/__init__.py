from app.services.frame.builder import FrameResponseBuilder, FrameStep, next_step
from app.services.frame.html import frame_meta_tags, render_frame_html
from app.services.frame.service import FrameService

__all__ = [
    "FrameResponseBuilder",
    "FrameService",
    "FrameStep",
    "next_step",
    "frame_meta_tags",
    "render_frame_html",
]
