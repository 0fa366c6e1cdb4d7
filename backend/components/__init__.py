"""Components served by this application."""

from backend.components.counter import counter
from backend.components.search import search_box
from engine.wire.components import ComponentRegistry


def build_registry() -> ComponentRegistry:
    return ComponentRegistry.register(counter, search_box)


__all__ = ["build_registry", "counter", "search_box"]
