"""Default interface for the files entity."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from ..interface import EntityInterface, EntityResult
from ..models import EntityKind, File, FileCollection


def get_all(files: EntityResult) -> List[File]:
    return files.data.get_all()


def find(files: EntityResult, value: str) -> Optional[File]:
    return files.data.find(value)


def filter_files(files: EntityResult, predicate: Callable[[File], bool]) -> FileCollection:
    return files.data.filter(predicate)


def for_adapter(files: EntityResult, name: str) -> FileCollection:
    """Files tagged with the adapter ``name``."""
    return files.data.filter(lambda file: file.adapter == name)


def create_interface(owner: Any = None) -> EntityInterface:
    interface = EntityInterface(EntityKind.FILES, owner=owner)
    interface.add_method("get_all", get_all)
    interface.add_method("find", find)
    interface.add_method("filter", filter_files)
    interface.add_method("for_adapter", for_adapter)
    return interface


__all__ = ["create_interface"]
