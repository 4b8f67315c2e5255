"""Frame endpoints: initial page, initial frame and frame actions."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.dependencies.services import FrameBuilder, Frames
from app.schemas.frame import FrameActionRequest, FrameResponse, FrameState
from app.services.frame import render_frame_html

logger = logging.getLogger(__name__)

router = APIRouter(tags=["frames"])


def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


async def _read_action(request: Request) -> FrameActionRequest:
    """Decode the action envelope. Missing or malformed bodies yield an empty action."""
    try:
        payload = await request.json()
    except ValueError:
        logger.debug("Frame action body is empty or not JSON")
        payload = None
    return FrameActionRequest.from_payload(payload)


@router.get("/", response_class=HTMLResponse)
async def frame_page(builder: FrameBuilder):
    """HTML page whose meta tags describe the initial frame."""
    logger.info("GET / - initial frame page")
    return HTMLResponse(render_frame_html(builder.initial()))


@router.get("/frames", response_model=FrameResponse)
async def get_initial_frame(builder: FrameBuilder):
    """Initial frame. No upstream lookups."""
    logger.info("GET /frames - initial frame")
    return builder.initial()


@router.post("/frames", response_model=FrameResponse)
async def post_frame_action(
    request: Request,
    frames: Frames,
    state: FrameState = FrameState.INITIAL,
):
    """Handle a button press on a frame in ``state``.

    Always answers with a renderable frame; failures become the error frame.
    Clients accepting text/html get the meta tag page instead of JSON.
    """
    action = await _read_action(request)
    logger.info("POST /frames - state: %s, fid: %s", state.value, action.fid)

    frame = await frames.handle(action, state)

    if _wants_html(request):
        return HTMLResponse(render_frame_html(frame))
    return frame
