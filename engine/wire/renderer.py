"""
Wire Engine — Renderer

Entry points:
  render_initial(request, name)           → component markup with its protocol envelope
  apply_update(message)                   → MessageResponse patch
  render_page(request, layout, page, data) → full page markup

Every template render gets a per-request helper table:
  {{#partial}}name{{/partial}}            render src/partials/<name>.html in the current context
  {{#livewire}}Name{{/livewire}}          initial markup of another component
  {{#livewireStyles}}{{/livewireStyles}}  bootstrap <style> for the client runtime
  {{#livewireScript}}{{/livewireScript}}  bootstrap <script> for the client runtime
plus any RenderFunc the application registers.
"""

from __future__ import annotations

import json
import logging
import secrets
import string
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic_core import PydanticSerializationError

from engine.wire.components import ComponentData, ComponentDefinition, ComponentRegistry
from engine.wire.errors import RenderError
from engine.wire.html import html_hash, update_html
from engine.wire.reconciler import apply_updates, build_response
from engine.wire.templates import Helper, TemplateEngine
from engine.wire.types import (
    ATTR_ID,
    ATTR_INITIAL_DATA,
    Fingerprint,
    InitialEffects,
    Message,
    MessageResponse,
    RendererOptions,
    RequestContext,
    ServerMemo,
    end_marker,
)

logger = logging.getLogger(__name__)

_STATIC = Path(__file__).parent / "static"

# Loaded once; emitted verbatim by the livewireStyles / livewireScript helpers.
LIVEWIRE_STYLES_HTML: str = (_STATIC / "livewire_styles.html").read_text(encoding="utf-8")
LIVEWIRE_SCRIPT_HTML: str = (_STATIC / "livewire_script.html").read_text(encoding="utf-8")

_ID_ALPHABET = string.ascii_letters + string.digits


@dataclass(frozen=True)
class RenderFunc:
    """
    An application-defined template helper.

    `func` is called once per request with the request context and must
    return a Mustache lambda: (section_text, render) -> markup.
    """

    name: str
    func: Callable[[RequestContext], Helper]


def random_id(length: int = 20) -> str:
    """
    Opaque per-instance component id.

    Uniqueness is not checked: a collision only matters between two
    instances rendered into the same page, and 62**20 makes that negligible.
    """
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


class WireRenderer:
    """Renders pages and components; stateless between requests."""

    def __init__(
        self,
        templates: TemplateEngine,
        registry: ComponentRegistry,
        render_funcs: Iterable[RenderFunc] = (),
        options: RendererOptions | None = None,
    ):
        self.templates = templates
        self.registry = registry
        self.render_funcs = list(render_funcs)
        self.options = options or RendererOptions()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def helpers(self, request: RequestContext) -> dict[str, Helper]:
        funcs: dict[str, Helper] = {
            "partial": self._partial_helper(request),
            "livewire": self._livewire_helper(request),
            "livewireStyles": lambda text, render: LIVEWIRE_STYLES_HTML,
            "livewireScript": lambda text, render: LIVEWIRE_SCRIPT_HTML,
        }
        for rf in self.render_funcs:
            funcs[rf.name] = rf.func(request)
        return funcs

    def _partial_helper(self, request: RequestContext) -> Helper:
        def partial(text: str, render: Callable[..., str]) -> str:
            name = text.strip()
            source = self.templates.load(f"partials/{name}.html")
            # `render` keeps the caller's context (and therefore these helpers) in scope.
            return render(source)

        return partial

    def _livewire_helper(self, request: RequestContext) -> Helper:
        def livewire(text: str, render: Callable[..., str]) -> str:
            return self.render_initial(request, text.strip())

        return livewire

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def render_page(
        self,
        request: RequestContext,
        layout: str,
        page: str,
        data: dict[str, Any] | None = None,
    ) -> str:
        """Render src/layouts/<layout> with src/pages/<page> available as {{> page}}."""
        page_source = self.templates.load(f"pages/{page}")
        return self.templates.render(
            f"layouts/{layout}",
            data or {},
            self.helpers(request),
            partials={"page": page_source},
        )

    def render_partial(self, request: RequestContext, name: str, data: dict[str, Any] | None = None) -> str:
        return self.templates.render(f"partials/{name}.html", data or {}, self.helpers(request))

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def render_component(
        self,
        request: RequestContext,
        definition: ComponentDefinition,
        data: ComponentData,
    ) -> tuple[str, dict[str, Any]]:
        """Render a component's template. Returns (markup, data document)."""
        document = _dump(definition, data)
        try:
            out = self.templates.render(f"livewire/{definition.name}.html", document, self.helpers(request))
        except RenderError as e:
            raise RenderError(
                "failed to execute html template",
                cause=e,
                context={"component": definition.name, "data": document},
            ) from e
        return out, document

    def render_initial(self, request: RequestContext, name: str) -> str:
        definition = self.registry.lookup(name)
        component_id = random_id(self.options.id_length)

        try:
            data = definition.initial_data()
        except Exception as e:
            raise RenderError("InitialData return value is invalid", cause=e, context={"component": name}) from e

        out, document = self.render_component(request, definition, data)

        fingerprint = Fingerprint(
            id=component_id,
            name=name,
            locale=self.options.locale,
            path=request.path,
            method=request.method,
            invalidation_hash=self.options.invalidation_hash,
        )
        memo = ServerMemo(html_hash=html_hash(out), data=document)
        initial_data = json.dumps(
            {
                "fingerprint": fingerprint.model_dump(by_alias=True),
                "serverMemo": memo.model_dump(mode="json", by_alias=True),
                "effects": InitialEffects().model_dump(),
            },
            separators=(",", ":"),
        )

        try:
            html = update_html(
                out,
                {ATTR_ID: component_id, ATTR_INITIAL_DATA: initial_data},
                end_marker(component_id),
                strict=self.options.strict_root,
            )
        except RenderError as e:
            raise RenderError("failed to render html", cause=e, context={"component": name}) from e

        logger.debug("wire: rendered %s id=%s", name, component_id)
        return html

    def apply_update(self, message: Message) -> MessageResponse:
        name = message.fingerprint.name
        definition = self.registry.lookup(name)

        data = definition.load_data(message.server_memo.data)
        data = apply_updates(definition, data, message.updates)

        # Same helper context as the original render: method + path come from the fingerprint.
        request = RequestContext.from_fingerprint(message.fingerprint)
        out, document = self.render_component(request, definition, data)

        try:
            response = build_response(message, document, out, strict=self.options.strict_root)
        except RenderError as e:
            raise RenderError("failed to render html", cause=e, context={"component": name}) from e

        logger.debug(
            "wire: updated %s id=%s updates=%d dirty=%s",
            name,
            message.fingerprint.id,
            len(message.updates),
            response.effects.dirty,
        )
        return response


def _dump(definition: ComponentDefinition, data: ComponentData) -> dict[str, Any]:
    try:
        return definition.dump_data(data)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise RenderError("failed to marshal data as json", cause=e, context={"component": definition.name}) from e
