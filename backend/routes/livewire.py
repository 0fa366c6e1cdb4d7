"""Component update endpoint — POST /livewire/message/{name}."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError

from backend.services.wire import get_renderer
from engine.wire.errors import (
    DeserializationError,
    MethodInvocationError,
    RenderError,
    WireError,
    WireLookupError,
)
from engine.wire.renderer import WireRenderer
from engine.wire.types import Message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/livewire", tags=["livewire"])


@router.post("/message/{name}", status_code=200)
def livewire_message(
    name: str,
    body: dict[str, Any] = Body(...),
    renderer: WireRenderer = Depends(get_renderer),
) -> dict[str, Any]:
    """
    Apply a client update message to a component and return the patch.

    Status codes:
    - 400: body is not a valid message, or its data does not fit the component
    - 404: unknown component, method, field or update type
    - 422: a component method failed
    - 500: the component could not be rendered
    """
    try:
        message = Message.model_validate(body)
    except ValidationError as e:
        logger.warning("livewire: malformed message for %s: %s", name, e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed message.") from e

    if message.fingerprint.name != name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Component name does not match fingerprint.",
        )

    try:
        response = renderer.apply_update(message)
    except WireError as e:
        raise _http_error(name, e) from e

    return response.to_wire()


def _http_error(name: str, e: WireError) -> HTTPException:
    if isinstance(e, WireLookupError):
        logger.warning("livewire: %s: %s", name, e)
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, DeserializationError):
        logger.warning("livewire: %s: %s", name, e)
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    if isinstance(e, MethodInvocationError):
        logger.warning("livewire: %s: %s", name, e)
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    if isinstance(e, RenderError):
        logger.exception("livewire: failed to render %s", name)
    else:
        logger.error("livewire: unexpected wire error for %s: %s", name, e)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to render component.")
