"""Page rendering — GET / serves the component demo page."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from backend.config import settings
from backend.services.wire import get_renderer
from engine.wire.errors import WireError
from engine.wire.renderer import WireRenderer
from engine.wire.types import RequestContext

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])


def request_context(request: Request) -> RequestContext:
    return RequestContext(method=request.method, path=request.url.path, locale=settings.LOCALE)


@router.get("/", response_class=HTMLResponse)
def index(request: Request, renderer: WireRenderer = Depends(get_renderer)) -> HTMLResponse:
    """Render the main layout with the index page and its embedded components."""
    try:
        html = renderer.render_page(request_context(request), "main.html", "index.html", {"title": "Wire components"})
    except WireError:
        logger.exception("pages: failed to render index")
        return HTMLResponse(
            content="<html><body><h1>500: Failed to render page</h1></body></html>",
            status_code=500,
        )
    return HTMLResponse(content=html)
