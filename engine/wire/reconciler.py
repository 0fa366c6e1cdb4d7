"""
Wire Engine — Update Reconciler

  apply_updates   — (definition, data, updates) → data   (ordered, all or nothing)
  dirty_fields    — shallow top-level diff of two data documents
  build_response  — hash the re-rendered markup and package the patch

No IO and no template rendering here; the renderer owns those steps and
calls in between apply_updates and build_response.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from engine.wire.components import ComponentData, ComponentDefinition
from engine.wire.errors import (
    DeserializationError,
    MethodInvocationError,
    UnknownUpdateTypeError,
    WireError,
)
from engine.wire.html import html_hash, update_html
from engine.wire.types import (
    ATTR_ID,
    UPDATE_CALL_METHOD,
    UPDATE_SYNC_INPUT,
    CallMethodPayload,
    Effects,
    Message,
    MessageResponse,
    ServerMemo,
    SyncInputPayload,
    Update,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply_updates(
    definition: ComponentDefinition,
    data: ComponentData,
    updates: list[Update],
) -> ComponentData:
    """
    Apply updates left to right; each sees the effect of the previous one.
    The first failure raises and nothing is returned.
    """
    for update in updates:
        handler = _HANDLERS.get(update.type)
        if handler is None:
            raise UnknownUpdateTypeError(update.type)
        data = handler(definition, data, update)
    return data


def dirty_fields(pre: dict[str, Any], post: dict[str, Any]) -> list[str]:
    """
    Top-level fields of `pre` that are missing from `post` or hold a different value.

    Fields that only exist in `post` are not reported. The client runtime
    has always received this asymmetric list, so it is kept as is.
    """
    dirty = []
    for key, value in pre.items():
        if key not in post or not json_equal(value, post[key]):
            dirty.append(key)
    return dirty


def build_response(
    message: Message,
    document: dict[str, Any],
    markup: str,
    *,
    strict: bool = False,
) -> MessageResponse:
    """
    Compare the re-rendered `markup` against the client's last hash. If it is
    unchanged the patch is empty; otherwise it carries the dirty fields and
    the new markup stamped with the instance id only.
    """
    new_hash = html_hash(markup)
    effects = Effects()

    if new_hash != message.server_memo.html_hash:
        pre = message.server_memo.data
        if not isinstance(pre, dict):
            raise DeserializationError("failed to unmarshal data pre", context={"data": pre})
        effects.dirty = dirty_fields(pre, document)
        effects.html = update_html(markup, {ATTR_ID: message.fingerprint.id}, "", strict=strict)

    return MessageResponse(
        effects=effects,
        server_memo=ServerMemo(html_hash=new_hash, data=document),
    )


def json_equal(a: Any, b: Any) -> bool:
    """
    Structural equality of two decoded JSON values. Numbers compare by value
    (1 == 1.0) but booleans never equal numbers.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, int | float) and isinstance(b, int | float):
        return float(a) == float(b)
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(json_equal(a[k], b[k]) for k in a)
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(json_equal(x, y) for x, y in zip(a, b))
    return type(a) is type(b) and a == b


# ---------------------------------------------------------------------------
# Update handlers
# ---------------------------------------------------------------------------

P = TypeVar("P", bound=BaseModel)


def _decode_payload(model: type[P], update: Update) -> P:
    try:
        return model.model_validate(update.payload)
    except ValidationError as e:
        raise DeserializationError(
            "failed to unmarshal payload",
            cause=e,
            context={"type": update.type, "payload": update.payload},
        ) from e


def _handle_call_method(definition: ComponentDefinition, data: ComponentData, update: Update) -> ComponentData:
    payload = _decode_payload(CallMethodPayload, update)
    context = {"component": definition.name, "payload": payload.model_dump()}
    try:
        result = definition.call(payload.method, data, payload.params)
    except WireError:
        raise
    except Exception as e:
        raise MethodInvocationError("failed to call method on component", cause=e, context=context) from e

    if not isinstance(result, definition.data_model):
        raise MethodInvocationError(
            f"method must return {definition.data_model.__name__}, got {type(result).__name__}",
            context=context,
        )
    return result


def _handle_sync_input(definition: ComponentDefinition, data: ComponentData, update: Update) -> ComponentData:
    payload = _decode_payload(SyncInputPayload, update)
    return definition.sync_input(data, payload.name, payload.value)


# ---------------------------------------------------------------------------
# Handler dispatch table
# ---------------------------------------------------------------------------

_HANDLERS: dict[str, Callable[[ComponentDefinition, ComponentData, Update], ComponentData]] = {
    UPDATE_CALL_METHOD: _handle_call_method,
    UPDATE_SYNC_INPUT: _handle_sync_input,
}
