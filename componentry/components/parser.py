"""Default parser for the components entity."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable

from ..models import Component, ComponentCollection
from ..pipeline import Parser


def catalogue_components(data: Any) -> ComponentCollection:
    """Turn raw component descriptors into a fresh :class:`ComponentCollection`."""
    if data is None:
        return ComponentCollection()
    items: Iterable[Any] = data.get_all() if hasattr(data, "get_all") else data
    components = []
    for item in items:
        if isinstance(item, Component):
            components.append(replace(item, files=list(item.files), config=dict(item.config)))
        else:
            components.append(Component.from_descriptor(item))
    return ComponentCollection(components)


def create_parser() -> Parser:
    return Parser([catalogue_components], name="components")


__all__ = ["catalogue_components", "create_parser"]
