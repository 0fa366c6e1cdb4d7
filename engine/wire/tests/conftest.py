"""
Wire engine test configuration.

Builds a throwaway HTML directory and a registry of small components:
  Counter   — {count}, methods Increment / Add / Explode / Broken
  Form      — {name, age, tags}, synced inputs
  Parent    — embeds a Counter
  Where     — renders the request path through a custom helper
  Fragments — template with two top-level elements
  Ghost     — registered without a template
"""

from __future__ import annotations

import html
import json
import re
from pathlib import Path

import pytest

from engine.wire.components import ComponentData, ComponentDefinition, ComponentRegistry
from engine.wire.renderer import RenderFunc, WireRenderer
from engine.wire.templates import TemplateEngine
from engine.wire.types import RendererOptions, RequestContext

TEMPLATES = {
    "livewire/Counter.html": (
        '<div class="counter">\n'
        "  <span>{{count}}</span>\n"
        '  <button wire:click="Increment">+</button>\n'
        "</div>\n"
    ),
    "livewire/Form.html": (
        "<form>\n"
        '  <input wire:model="name" value="{{name}}">\n'
        "  <span>{{age}}</span>\n"
        "</form>\n"
    ),
    "livewire/Parent.html": "<section>{{#livewire}}Counter{{/livewire}}</section>\n",
    "livewire/Where.html": "<p>{{#requestPath}}{{/requestPath}} {{n}}</p>\n",
    "livewire/Fragments.html": "<p>a</p>\n<p>b</p>\n",
    "layouts/main.html": (
        "<html><head>{{#livewireStyles}}{{/livewireStyles}}</head>"
        "<body>{{#partial}}header{{/partial}}{{> page}}{{#livewireScript}}{{/livewireScript}}</body></html>"
    ),
    "pages/index.html": "<main>{{#livewire}}Counter{{/livewire}}</main>",
    "pages/where.html": "<main>{{#requestPath}}{{/requestPath}}</main>",
    "partials/header.html": "<header>{{title}}</header>",
}


class CounterData(ComponentData):
    count: int = 0


class FormData(ComponentData):
    name: str = ""
    age: int = 0
    tags: list[str] = []


class EmptyData(ComponentData):
    pass


class WhereData(ComponentData):
    n: int = 0


def make_counter() -> ComponentDefinition:
    counter = ComponentDefinition("Counter", CounterData, initial_data=lambda: CounterData(count=0))

    @counter.method("Increment")
    def increment(data: CounterData) -> CounterData:
        return data.model_copy(update={"count": data.count + 1})

    @counter.method("Add")
    def add(data: CounterData, amount: str) -> CounterData:
        return data.model_copy(update={"count": data.count + int(amount)})

    @counter.method("Explode")
    def explode(data: CounterData) -> CounterData:
        raise ValueError("boom")

    @counter.method("Broken")
    def broken(data: CounterData):
        return None

    return counter


def make_where() -> ComponentDefinition:
    where = ComponentDefinition("Where", WhereData)

    @where.method("Bump")
    def bump(data: WhereData) -> WhereData:
        data.n += 1
        return data

    return where


def make_registry() -> ComponentRegistry:
    return ComponentRegistry.register(
        make_counter(),
        ComponentDefinition("Form", FormData),
        ComponentDefinition("Parent", EmptyData),
        make_where(),
        ComponentDefinition("Fragments", EmptyData),
        ComponentDefinition("Ghost", EmptyData),
    )


def request_path_func() -> RenderFunc:
    return RenderFunc("requestPath", lambda request: lambda text, render: request.path)


def initial_envelope(markup: str, name: str | None = None) -> dict:
    """Decode the wire:initial-data attribute (of component `name`, if given)."""
    for raw in re.findall(r'wire:initial-data="([^"]*)"', markup):
        envelope = json.loads(html.unescape(raw))
        if name is None or envelope["fingerprint"]["name"] == name:
            return envelope
    raise AssertionError(f"no initial data for {name!r} in markup")


@pytest.fixture
def html_dir(tmp_path: Path) -> Path:
    for ref, source in TEMPLATES.items():
        path = tmp_path / "src" / ref
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
    return tmp_path


@pytest.fixture
def registry() -> ComponentRegistry:
    return make_registry()


@pytest.fixture
def renderer(html_dir: Path, registry: ComponentRegistry) -> WireRenderer:
    return WireRenderer(
        TemplateEngine(html_dir),
        registry,
        render_funcs=[request_path_func()],
        options=RendererOptions(),
    )


@pytest.fixture
def request_ctx() -> RequestContext:
    return RequestContext(method="GET", path="/counter")


@pytest.fixture
def read_envelope():
    return initial_envelope
