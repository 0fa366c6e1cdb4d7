"""
Wire Engine — Shared Types

Wire schema for the component update protocol plus the small data classes
passed between renderer, reconciler and the HTTP layer.

Field names are camelCase on the wire (the client runtime depends on them)
and snake_case in Python; pydantic aliases bridge the two. Unknown keys sent
by the client are ignored, matching what the client runtime expects.

  Message         { fingerprint, serverMemo, updates: [Update] }
  Fingerprint     { id, name, locale, path, method, v }
  ServerMemo      { htmlHash, data, dataMeta, children, errors }
  Update          { type: "callMethod"|"syncInput", payload }
  CallMethod      { id, method, params: [string] }
  SyncInput       { id, name, value }
  MessageResponse { effects: { dirty: [string], html }, serverMemo }
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

UPDATE_CALL_METHOD = "callMethod"
UPDATE_SYNC_INPUT = "syncInput"

DEFAULT_LOCALE = "en"
DEFAULT_INVALIDATION_HASH = "aaa"

ATTR_ID = "wire:id"
ATTR_INITIAL_DATA = "wire:initial-data"


def end_marker(component_id: str) -> str:
    """Comment appended after a component's root element."""
    return f"<!-- Livewire Component wire-end:{component_id} -->"


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


class Fingerprint(BaseModel):
    """Identity of one rendered component instance plus its routing context."""

    model_config = {"populate_by_name": True}

    id: str
    name: str
    locale: str = DEFAULT_LOCALE
    path: str = "/"
    method: str = "GET"
    invalidation_hash: str = Field(default=DEFAULT_INVALIDATION_HASH, alias="v")


class ServerMemo(BaseModel):
    """Snapshot the client echoes back on every update. The server keeps none of it."""

    model_config = {"populate_by_name": True}

    html_hash: str = Field(default="", alias="htmlHash")
    data: Any = None  # component data as a JSON document
    # Reserved; echoed as sent, never interpreted.
    data_meta: Any = Field(default=None, alias="dataMeta")
    children: Any = None
    errors: Any = None


class Update(BaseModel):
    """One client update. The payload stays raw until its type is known."""

    type: str
    payload: Any = None


class CallMethodPayload(BaseModel):
    id: str = ""
    method: str
    params: list[str] = Field(default_factory=list)


class SyncInputPayload(BaseModel):
    id: str = ""
    name: str
    value: str


class Message(BaseModel):
    """What the client POSTs for a component update."""

    model_config = {"populate_by_name": True}

    fingerprint: Fingerprint
    server_memo: ServerMemo = Field(alias="serverMemo")
    updates: list[Update] = Field(default_factory=list)


class Effects(BaseModel):
    dirty: list[str] = Field(default_factory=list)
    html: str | None = None  # only set when the rendered markup changed


class InitialEffects(BaseModel):
    """The effects block embedded in the initial envelope."""

    listeners: list[str] | None = None


class MessageResponse(BaseModel):
    """What the update endpoint returns."""

    model_config = {"populate_by_name": True}

    effects: Effects = Field(default_factory=Effects)
    server_memo: ServerMemo = Field(alias="serverMemo")

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with wire field names; `effects.html` dropped when unchanged."""
        out = self.model_dump(mode="json", by_alias=True)
        if self.effects.html is None:
            out["effects"].pop("html", None)
        return out


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RequestContext:
    """
    The slice of an HTTP request the renderer needs.

    Built by the HTTP layer for page renders, and rebuilt from the
    fingerprint (method + path) when re-rendering for an update.
    """

    method: str = "GET"
    path: str = "/"
    locale: str = DEFAULT_LOCALE

    @classmethod
    def from_fingerprint(cls, fingerprint: Fingerprint) -> RequestContext:
        return cls(
            method=fingerprint.method,
            path=fingerprint.path,
            locale=fingerprint.locale or DEFAULT_LOCALE,
        )


@dataclass(frozen=True)
class RendererOptions:
    """Knobs the renderer reads; filled from backend settings."""

    locale: str = DEFAULT_LOCALE
    invalidation_hash: str = DEFAULT_INVALIDATION_HASH
    strict_root: bool = False
    id_length: int = 20
