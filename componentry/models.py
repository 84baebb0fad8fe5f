"""Core data models shared across componentry components."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Mapping, Optional, TypeVar

T = TypeVar("T")


class EntityKind(str, Enum):
    """The two entity graphs produced by a parse run."""

    FILES = "files"
    COMPONENTS = "components"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


@dataclass
class File:
    """A source file read from one of the configured source directories."""

    path: Path
    base: Path
    contents: Optional[bytes] = None
    size: int = 0
    adapter: Optional[str] = None
    encoding: str = "utf-8"

    @property
    def relative(self) -> str:
        try:
            return self.path.relative_to(self.base).as_posix()
        except ValueError:
            return self.path.name

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def suffix(self) -> str:
        return self.path.suffix.lower()

    @property
    def dirname(self) -> str:
        parent = Path(self.relative).parent.as_posix()
        return "" if parent == "." else parent

    def text(self, encoding: Optional[str] = None) -> str:
        """Decode the contents, using the encoding the file was read with unless overridden."""
        encoding = encoding or self.encoding
        if self.contents is None:
            return self.path.read_text(encoding=encoding)
        return self.contents.decode(encoding)

    def copy(self) -> "File":
        return replace(self)


@dataclass
class Component:
    """A component derived from a directory of files."""

    name: str
    path: Path
    relative: str = ""
    config: Dict[str, Any] = field(default_factory=dict)
    files: List[File] = field(default_factory=list)

    @classmethod
    def from_descriptor(cls, descriptor: Mapping[str, Any]) -> "Component":
        return cls(
            name=str(descriptor["name"]),
            path=Path(descriptor["path"]),
            relative=str(descriptor.get("relative", "")),
            config=dict(descriptor.get("config") or {}),
            files=list(descriptor.get("files") or []),
        )

    def find_file(self, value: str) -> Optional[File]:
        """Return the component file whose name or path relative to the component matches."""
        for file in self.files:
            if file.name == value or self._local_path(file) == value:
                return file
        return None

    def _local_path(self, file: File) -> str:
        try:
            return file.path.relative_to(self.path).as_posix()
        except ValueError:
            return file.name


class _Collection(Generic[T]):
    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: List[T] = list(items)

    def get_all(self) -> List[T]:
        return list(self._items)

    def filter(self, predicate: Callable[[T], bool]):
        return type(self)(item for item in self._items if predicate(item))

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._items == other._items  # type: ignore[attr-defined]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"


class FileCollection(_Collection[File]):
    """Ordered collection of files returned by the filesystem reader."""

    def find(self, value: str | Path) -> Optional[File]:
        """Find a file by relative path, file name or absolute path."""
        target = str(value)
        for file in self._items:
            if file.relative == target or str(file.path) == target:
                return file
        for file in self._items:
            if file.name == target:
                return file
        return None


class ComponentCollection(_Collection[Component]):
    """Ordered collection of components."""

    def find(self, name: str) -> Optional[Component]:
        for component in self._items:
            if component.name == name:
                return component
        return None


__all__ = [
    "Component",
    "ComponentCollection",
    "EntityKind",
    "File",
    "FileCollection",
]
