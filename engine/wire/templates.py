"""
Wire Engine — Template Engine

Renders Mustache templates (chevron) from an HTML directory:

  <html_dir>/src/layouts/*.html    page layouts
  <html_dir>/src/pages/*.html      page bodies, included by layouts as {{> page}}
  <html_dir>/src/partials/*.html   shared snippets, {{> name}} or {{#partial}}name{{/partial}}
  <html_dir>/src/livewire/*.html   one template per component, named after it

Helpers are Mustache lambdas: callables taking (section_text, render) and
returning markup, which chevron inserts without escaping.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import chevron

from engine.wire.errors import RenderError, WireError

Helper = Callable[[str, Callable[..., str]], str]

TEMPLATE_EXT = "html"


class TemplateEngine:
    """Loads template sources from disk on every render, so edits show up immediately."""

    def __init__(self, html_dir: str | Path):
        self.html_dir = Path(html_dir)

    @property
    def src_dir(self) -> Path:
        return self.html_dir / "src"

    def path_for(self, ref: str) -> Path:
        return self.src_dir / ref

    def load(self, ref: str) -> str:
        """Read template source for `ref` (e.g. "livewire/Counter.html")."""
        path = self.path_for(ref)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise RenderError("failed to parse template", cause=e, context={"template": ref}) from e

    def render(
        self,
        ref: str,
        data: Mapping[str, Any],
        helpers: Mapping[str, Helper] | None = None,
        partials: dict[str, str] | None = None,
    ) -> str:
        """
        Render template `ref` against `data` with `helpers` in scope.
        Data keys shadow helpers of the same name.
        """
        return self.render_source(ref, self.load(ref), data, helpers, partials)

    def render_source(
        self,
        ref: str,
        source: str,
        data: Mapping[str, Any],
        helpers: Mapping[str, Helper] | None = None,
        partials: dict[str, str] | None = None,
    ) -> str:
        context: dict[str, Any] = {**(helpers or {}), **data}
        try:
            return chevron.render(
                source,
                context,
                partials_path=str(self.src_dir / "partials"),
                partials_ext=TEMPLATE_EXT,
                partials_dict=partials or {},
            )
        except WireError:
            # Raised by a helper (e.g. a nested component); already descriptive.
            raise
        except Exception as e:
            raise RenderError("failed to execute template", cause=e, context={"template": ref}) from e
