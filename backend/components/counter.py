"""Counter — the smallest useful component."""

from __future__ import annotations

from engine.wire.components import ComponentData, ComponentDefinition


class CounterData(ComponentData):
    count: int = 0


counter = ComponentDefinition("Counter", CounterData, initial_data=lambda: CounterData(count=0))


@counter.method("Increment")
def increment(data: CounterData) -> CounterData:
    return data.model_copy(update={"count": data.count + 1})


@counter.method("Decrement")
def decrement(data: CounterData) -> CounterData:
    return data.model_copy(update={"count": data.count - 1})


@counter.method("Add")
def add(data: CounterData, amount: str = "1") -> CounterData:
    # Params arrive as strings from the wire.
    return data.model_copy(update={"count": data.count + int(amount)})


@counter.method("Reset")
def reset(data: CounterData) -> CounterData:
    return CounterData()
