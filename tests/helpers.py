"""Shared test helpers."""

from __future__ import annotations

from typing import Any, Iterator


def walk(component: Any) -> Iterator[Any]:
    """Yield *component* and every Dash component below it."""
    if component is None or isinstance(component, (str, int, float)):
        return
    if isinstance(component, (list, tuple)):
        for child in component:
            yield from walk(child)
        return
    yield component
    yield from walk(getattr(component, "children", None))


def find(component: Any, id_: Any) -> Any:
    for c in walk(component):
        if getattr(c, "id", None) == id_:
            return c
    raise LookupError(id_)
