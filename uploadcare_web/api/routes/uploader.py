"""
Uploader snippet endpoints.

Return ready-to-embed HTML for pages that are not rendered by this
service (static sites, other backends).
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import HTMLResponse

from ...views.include_tags import UPLOADER_MODES
from ..dependencies import UploaderTagsDep

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_mode(mode: str) -> None:
    if mode not in UPLOADER_MODES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"mode must be one of: {', '.join(UPLOADER_MODES)}",
        )


@router.get(
    "/include",
    response_class=HTMLResponse,
    summary="Script and stylesheet tags for the File Uploader",
)
async def include(
    tags: UploaderTagsDep,
    minified: bool = True,
    modes: list[str] = Query(default=["regular"]),
) -> HTMLResponse:
    for mode in modes:
        _check_mode(mode)
    return HTMLResponse(tags.include(minified=minified, modes=modes))


@router.get(
    "/field",
    response_class=HTMLResponse,
    summary="Uploader bound to a form field",
)
async def field(
    tags: UploaderTagsDep,
    name: str = Query(..., min_length=1, description="Form field name, e.g. post[photos]"),
    value: Optional[str] = Query(None, description="Current field value"),
    mode: str = "regular",
    multiple: bool = False,
    locale: Optional[str] = None,
) -> HTMLResponse:
    _check_mode(mode)
    config = {"locale": locale} if locale else {}

    logger.debug("Rendering uploader field", extra={"name": name, "mode": mode})

    return HTMLResponse(
        tags.field_tag(name, value=value, mode=mode, config=config, multiple=multiple)
    )
