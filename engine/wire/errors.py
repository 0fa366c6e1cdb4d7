"""
Wire Engine — Errors

Every failure in the component pipeline is raised as a WireError carrying a
human-readable message, the originating exception (if any), and a context
dict with diagnostic fields (component name, payload, field name, ...).

Taxonomy:
  WireLookupError        — unknown component / method / field / update type
  DeserializationError   — malformed payload or schema mismatch
  RenderError            — template engine or markup parse/mutation failure
  MethodInvocationError  — a component's own method failed

Nothing here is retried. The HTTP layer decides the user-visible response.
"""

from __future__ import annotations

from typing import Any


class WireError(Exception):
    """Base class for component pipeline failures."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context or {}

    def __str__(self) -> str:
        text = self.message
        if self.context:
            fields = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            text = f"{text} ({fields})"
        if self.cause is not None:
            text = f"{text}: {self.cause}"
        return text


class WireLookupError(WireError, LookupError):
    """Client referenced something that is not registered."""


class ComponentNotFoundError(WireLookupError):
    def __init__(self, name: str):
        super().__init__("component does not exist", context={"name": name})
        self.name = name


class MethodNotFoundError(WireLookupError):
    def __init__(self, component: str, method: str):
        super().__init__(
            "method does not exist on component",
            context={"component": component, "method": method},
        )
        self.component = component
        self.method = method


class FieldNotFoundError(WireLookupError):
    def __init__(self, component: str, field: str):
        super().__init__(
            "field does not exist on component data",
            context={"component": component, "field": field},
        )
        self.component = component
        self.field = field


class UnknownUpdateTypeError(WireLookupError):
    def __init__(self, update_type: str):
        super().__init__("unknown update type", context={"type": update_type})
        self.update_type = update_type


class DeserializationError(WireError):
    """A payload could not be decoded into the shape it must have."""


class RenderError(WireError):
    """Template rendering or markup mutation failed."""


class MethodInvocationError(WireError):
    """A component method raised or returned something unusable."""
