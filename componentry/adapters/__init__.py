"""Render adapters and the factory registry for built-in adapter names."""

from __future__ import annotations

from importlib import metadata
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .base import Adapter, BaseAdapter, adapter_attr, validate_adapter
from .jinja import JinjaAdapter
from .text import TextAdapter

_ENTRY_POINT_GROUP = "componentry.adapters"

AdapterFactory = Callable[[Mapping[str, Any]], Any]

_BUILTIN_FACTORIES: Dict[str, AdapterFactory] = {
    "text": TextAdapter,
    "jinja": JinjaAdapter,
}


def get_adapter_factory(name: str) -> Optional[AdapterFactory]:
    """Return the factory registered for ``name``, built-ins first, then entry points."""
    factory = _BUILTIN_FACTORIES.get(name)
    if factory is not None:
        return factory
    for entry in _iter_entry_points():
        if entry.name != name:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise RuntimeError(f"Failed to load adapter entry point '{name}': {exc}") from exc
        if not callable(loaded):
            raise TypeError(f"Adapter entry point '{name}' must be a factory callable")
        return loaded
    return None


def available_adapters() -> List[str]:
    names = list(_BUILTIN_FACTORIES)
    for entry in _iter_entry_points():
        if entry.name not in names:
            names.append(entry.name)
    return names


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover - defensive guard
        return []

    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]

    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "Adapter",
    "BaseAdapter",
    "JinjaAdapter",
    "TextAdapter",
    "adapter_attr",
    "available_adapters",
    "get_adapter_factory",
    "validate_adapter",
]
