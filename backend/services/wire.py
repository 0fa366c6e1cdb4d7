"""Process-wide component renderer, built once from settings."""

from __future__ import annotations

import logging

from backend.components import build_registry
from backend.config import Settings, settings
from engine.wire.renderer import WireRenderer
from engine.wire.templates import TemplateEngine

logger = logging.getLogger(__name__)


def build_renderer(cfg: Settings) -> WireRenderer:
    registry = build_registry()
    renderer = WireRenderer(
        templates=TemplateEngine(cfg.html_dir),
        registry=registry,
        options=cfg.renderer_options(),
    )
    logger.info("wire: %d components registered from %s", len(registry), cfg.html_dir)
    return renderer


wire_renderer = build_renderer(settings)


def get_renderer() -> WireRenderer:
    """FastAPI dependency; tests override it via app.dependency_overrides."""
    return wire_renderer
