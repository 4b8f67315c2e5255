"""Image rendering endpoint referenced by every frame."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, Response

from app.dependencies.services import ImageRenderer
from app.schemas.image import ImageParams
from app.services.render import PLACEHOLDER_MEDIA_TYPE, PLACEHOLDER_PNG, RenderFailure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["images"])

CACHE_CONTROL = "public, max-age=300"


@router.get("/og")
def render_og_image(
    renderer: ImageRenderer,
    fid: str = "",
    join_date: Annotated[str, Query(alias="joinDate")] = "",
    anniversary: str = "",
    is_error: Annotated[bool, Query(alias="isError")] = False,
    error_message: Annotated[str, Query(alias="errorMessage")] = "",
    is_initial: Annotated[bool, Query(alias="isInitial")] = False,
    awesome_text: Annotated[str, Query(alias="awesomeText")] = "",
    username: str = "",
):
    """Render a frame card from query parameters.

    Falls back to a placeholder PNG when the backend fails.
    """
    params = ImageParams(
        fid=fid,
        join_date=join_date,
        anniversary=anniversary,
        is_error=is_error,
        error_message=error_message,
        is_initial=is_initial,
        awesome_text=awesome_text,
        username=username,
    )
    logger.debug("OG image params: %s", params.model_dump())

    try:
        content = renderer.render(params)
    except RenderFailure as e:
        logger.error("Serving placeholder image after render failure: %s", e)
        return Response(
            content=PLACEHOLDER_PNG,
            media_type=PLACEHOLDER_MEDIA_TYPE,
            headers={"Cache-Control": "no-store"},
        )

    return Response(
        content=content,
        media_type=renderer.media_type,
        headers={"Cache-Control": CACHE_CONTROL},
    )
