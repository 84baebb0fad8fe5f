"""Default interface for the components entity."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from ..interface import EntityInterface, EntityResult
from ..models import Component, ComponentCollection, EntityKind


def get_all(components: EntityResult) -> List[Component]:
    return components.data.get_all()


def find(components: EntityResult, name: str) -> Optional[Component]:
    return components.data.find(name)


def filter_components(
    components: EntityResult, predicate: Callable[[Component], bool]
) -> ComponentCollection:
    return components.data.filter(predicate)


def create_interface(owner: Any = None) -> EntityInterface:
    interface = EntityInterface(EntityKind.COMPONENTS, owner=owner)
    interface.add_method("get_all", get_all)
    interface.add_method("find", find)
    interface.add_method("filter", filter_components)
    return interface


__all__ = ["create_interface"]
