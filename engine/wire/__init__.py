"""
Wire Engine — server-driven stateful components.

Components:
  components  — ComponentData, ComponentDefinition, ComponentRegistry
  templates   — Mustache template engine over an HTML directory
  html        — root-element attribute stamping + content hash
  reconciler  — (definition, data, updates) → data, dirty-field diff
  renderer    — render_initial / apply_update / render_page

The server keeps no component state between requests: everything needed to
resume a component travels in the fingerprint + serverMemo the client echoes.
"""

from engine.wire.components import (
    ComponentData,
    ComponentDefinition,
    ComponentRegistry,
)
from engine.wire.errors import (
    ComponentNotFoundError,
    DeserializationError,
    MethodInvocationError,
    RenderError,
    WireError,
    WireLookupError,
)
from engine.wire.html import html_hash, update_html
from engine.wire.reconciler import apply_updates, dirty_fields
from engine.wire.renderer import RenderFunc, WireRenderer
from engine.wire.templates import TemplateEngine
from engine.wire.types import (
    Fingerprint,
    Message,
    MessageResponse,
    RendererOptions,
    RequestContext,
    ServerMemo,
    Update,
)

__all__ = [
    "ComponentData",
    "ComponentDefinition",
    "ComponentRegistry",
    "ComponentNotFoundError",
    "DeserializationError",
    "MethodInvocationError",
    "RenderError",
    "WireError",
    "WireLookupError",
    "html_hash",
    "update_html",
    "apply_updates",
    "dirty_fields",
    "RenderFunc",
    "WireRenderer",
    "TemplateEngine",
    "Fingerprint",
    "Message",
    "MessageResponse",
    "RendererOptions",
    "RequestContext",
    "ServerMemo",
    "Update",
]
