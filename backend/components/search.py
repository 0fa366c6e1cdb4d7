"""SearchBox — filters a fixed list as the user types (wire:model on `query`)."""

from __future__ import annotations

from engine.wire.components import ComponentData, ComponentDefinition

FRUITS = ["apple", "apricot", "banana", "blueberry", "cherry", "grape", "lemon", "mango", "peach", "pear"]


class SearchBoxData(ComponentData):
    query: str = ""
    results: list[str] = list(FRUITS)
    limit: int = 5


def _filter(query: str, limit: int) -> list[str]:
    q = query.strip().lower()
    return [f for f in FRUITS if q in f][:limit]


search_box = ComponentDefinition(
    "SearchBox",
    SearchBoxData,
    initial_data=lambda: SearchBoxData(results=_filter("", 5)),
)


@search_box.method("search")
def search(data: SearchBoxData) -> SearchBoxData:
    return data.model_copy(update={"results": _filter(data.query, data.limit)})


@search_box.method("clear")
def clear(data: SearchBoxData) -> SearchBoxData:
    return data.model_copy(update={"query": "", "results": _filter("", data.limit)})
