"""
Wire backend configuration — all environment variables in one place.

Read from environment at import time.
"""

from __future__ import annotations

import os
from pathlib import Path

from engine.wire.types import DEFAULT_INVALIDATION_HASH, DEFAULT_LOCALE, RendererOptions

_DEFAULT_HTML_DIR = Path(__file__).parent / "web"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings from environment variables."""

    # Templates
    HTML_DIR: str = os.environ.get("WIRE_HTML_DIR", str(_DEFAULT_HTML_DIR))
    USE_LOCAL_HTML: bool = _env_bool("USE_LOCAL_HTML")  # serve <cwd>/web instead, for template hot-reload

    # Protocol
    LOCALE: str = os.environ.get("WIRE_LOCALE", DEFAULT_LOCALE)
    INVALIDATION_HASH: str = os.environ.get("WIRE_INVALIDATION_HASH", DEFAULT_INVALIDATION_HASH)
    STRICT_ROOT: bool = _env_bool("WIRE_STRICT_ROOT")  # reject templates with several top-level elements

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    @property
    def html_dir(self) -> Path:
        if self.USE_LOCAL_HTML:
            return Path.cwd() / "web"
        return Path(self.HTML_DIR)

    def renderer_options(self) -> RendererOptions:
        return RendererOptions(
            locale=self.LOCALE,
            invalidation_hash=self.INVALIDATION_HASH,
            strict_root=self.STRICT_ROOT,
        )


# Singleton instance
settings = Settings()
