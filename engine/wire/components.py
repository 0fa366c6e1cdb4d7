"""
Wire Engine — Components

A component is a named, server-rendered fragment with its own data and
update methods. Dispatch from the wire is by name through two tables built
when the definition is created:

  methods  — method name → handler(data, *params) -> data
  fields   — wire field name → FieldAccessor (get / coercing set)

Component data is a pydantic model (subclass ComponentData). The protocol
only ever carries its JSON document form; load_data / dump_data are the
serialization boundary.

Definitions are frozen when a ComponentRegistry takes them, and the registry
is read-only afterwards, so it can be shared across concurrent requests.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo

from engine.wire.errors import (
    ComponentNotFoundError,
    DeserializationError,
    FieldNotFoundError,
    MethodNotFoundError,
)


class ComponentData(BaseModel):
    """Base for component data shapes. Unknown keys are a protocol error."""

    model_config = {"extra": "forbid", "validate_assignment": True}


MethodHandler = Callable[..., ComponentData]


@dataclass(frozen=True)
class FieldAccessor:
    """Getter/setter for one top-level data field, addressed by its wire name."""

    name: str  # wire name (alias if the model declares one)
    attribute: str  # python attribute on the model
    adapter: TypeAdapter

    def set(self, data: ComponentData, raw: str) -> ComponentData:
        """Coerce `raw` to the field's declared type and return updated data."""
        value = self.adapter.validate_python(raw)
        return data.model_copy(update={self.attribute: value})


def build_field_accessors(data_model: type[ComponentData]) -> dict[str, FieldAccessor]:
    accessors: dict[str, FieldAccessor] = {}
    for attribute, info in data_model.model_fields.items():
        wire_name = info.alias or attribute
        accessors[wire_name] = FieldAccessor(
            name=wire_name,
            attribute=attribute,
            adapter=_field_adapter(info),
        )
    return accessors


def _field_adapter(info: FieldInfo) -> TypeAdapter:
    # Keep constraints (Field(ge=0), ...) when coercing synced input.
    if info.metadata:
        return TypeAdapter(Annotated[(info.annotation, *info.metadata)])
    return TypeAdapter(info.annotation)


# ---------------------------------------------------------------------------
# Definition
# ---------------------------------------------------------------------------


class ComponentDefinition:
    """
    Everything the engine knows about one component.

        counter = ComponentDefinition("Counter", CounterData)

        @counter.method("increment")
        def increment(data: CounterData) -> CounterData:
            return data.model_copy(update={"count": data.count + 1})

    `initial_data` defaults to calling the data model with no arguments.
    Handlers receive the current data plus the call's string params, and must
    return a data instance (the same object, mutated, is fine).
    """

    def __init__(
        self,
        name: str,
        data_model: type[ComponentData],
        initial_data: Callable[[], ComponentData] | None = None,
        methods: dict[str, MethodHandler] | None = None,
    ):
        if not name:
            raise ValueError("component name must not be empty")
        self.name = name
        self.data_model = data_model
        self._initial_data = initial_data or data_model
        self._methods: dict[str, MethodHandler] = dict(methods or {})
        self._fields = build_field_accessors(data_model)
        self._frozen = False

    def __repr__(self) -> str:
        return f"ComponentDefinition({self.name!r}, {self.data_model.__name__})"

    # -- registration --

    def method(self, name: str | None = None) -> Callable[[MethodHandler], MethodHandler]:
        """Decorator: register a handler under `name` (defaults to the function name)."""

        def decorator(fn: MethodHandler) -> MethodHandler:
            if self._frozen:
                raise RuntimeError(f"component {self.name!r} is already registered; methods are fixed")
            self._methods[name or fn.__name__] = fn
            return fn

        return decorator

    def freeze(self) -> None:
        self._frozen = True

    @property
    def methods(self) -> MappingProxyType[str, MethodHandler]:
        return MappingProxyType(self._methods)

    @property
    def fields(self) -> MappingProxyType[str, FieldAccessor]:
        return MappingProxyType(self._fields)

    # -- dispatch --

    def handler(self, method: str) -> MethodHandler:
        fn = self._methods.get(method)
        if fn is None:
            raise MethodNotFoundError(self.name, method)
        return fn

    def call(self, method: str, data: ComponentData, params: Sequence[str] = ()) -> Any:
        """Invoke method `method` with positional string params. Returns whatever the handler returns."""
        return self.handler(method)(data, *params)

    def field(self, name: str) -> FieldAccessor:
        accessor = self._fields.get(name)
        if accessor is None:
            raise FieldNotFoundError(self.name, name)
        return accessor

    def sync_input(self, data: ComponentData, name: str, value: str) -> ComponentData:
        """Assign a synced string value to field `name`, coercing to its declared type."""
        accessor = self.field(name)
        try:
            return accessor.set(data, value)
        except ValidationError as e:
            raise DeserializationError(
                "failed to assign input value to field",
                cause=e,
                context={"component": self.name, "field": name, "value": value},
            ) from e

    # -- serialization boundary --

    def initial_data(self) -> ComponentData:
        data = self._initial_data()
        if not isinstance(data, self.data_model):
            raise TypeError(
                f"initial data for {self.name!r} must be {self.data_model.__name__}, got {type(data).__name__}"
            )
        return data

    def load_data(self, document: Any) -> ComponentData:
        """Rebuild data from its JSON document. Every declared field must be present."""
        context = {"data": document, "type": self.data_model.__name__}
        if not isinstance(document, dict):
            raise DeserializationError("failed to unmarshal data into its type: not an object", context=context)

        missing = [name for name in self._fields if name not in document]
        if missing:
            raise DeserializationError(
                "failed to unmarshal data into its type: missing fields",
                context={**context, "missing": missing},
            )

        try:
            return self.data_model.model_validate(document)
        except ValidationError as e:
            raise DeserializationError("failed to unmarshal data into its type", cause=e, context=context) from e

    def dump_data(self, data: ComponentData) -> dict[str, Any]:
        return data.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ComponentRegistry:
    """Read-only name → ComponentDefinition map, built once at startup."""

    def __init__(self, definitions: Iterable[ComponentDefinition] = ()):
        by_name: dict[str, ComponentDefinition] = {}
        for definition in definitions:
            if definition.name in by_name:
                raise ValueError(f"component {definition.name!r} registered twice")
            definition.freeze()
            by_name[definition.name] = definition
        self._by_name = MappingProxyType(by_name)

    @classmethod
    def register(cls, *definitions: ComponentDefinition) -> ComponentRegistry:
        return cls(definitions)

    def lookup(self, name: str) -> ComponentDefinition:
        definition = self._by_name.get(name)
        if definition is None:
            raise ComponentNotFoundError(name)
        return definition

    def get(self, name: str) -> ComponentDefinition | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return sorted(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[ComponentDefinition]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)
