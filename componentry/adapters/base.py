"""Adapter contract and registration-time validation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol, Tuple, runtime_checkable

from ..errors import require
from ..models import File

Done = Callable[..., Any]


@runtime_checkable
class Adapter(Protocol):
    """Structural contract for render adapters.

    ``match`` is optional; adapters without one claim every file.
    """

    name: str

    def render(self, file: File, context: Mapping[str, Any], done: Done) -> Any:
        """Render ``file`` with ``context`` and report through ``done``."""


def adapter_attr(adapter: Any, key: str, default: Any = None) -> Any:
    """Read ``key`` from an adapter given either as an object or as a mapping."""
    if isinstance(adapter, Mapping):
        return adapter.get(key, default)
    return getattr(adapter, key, default)


def validate_adapter(adapter: Adapter | Mapping[str, Any]) -> Adapter | Mapping[str, Any]:
    """Check ``adapter`` against the :class:`Adapter` contract, as an object or a mapping."""
    name = adapter_attr(adapter, "name")
    require(
        isinstance(name, str) and bool(name),
        "add_adapter: adapter must expose a non-empty string 'name'",
        "adapter-invalid",
    )
    require(
        callable(adapter_attr(adapter, "render")),
        f"add_adapter: adapter '{name}' must expose a callable 'render'",
        "adapter-invalid",
    )
    match = adapter_attr(adapter, "match")
    require(
        match is None or callable(match),
        f"add_adapter: adapter '{name}' 'match' must be callable when given",
        "adapter-invalid",
    )
    return adapter


class BaseAdapter(ABC):
    """Shared option handling for the built-in adapters."""

    default_name: str = ""
    default_extensions: Tuple[str, ...] = ()

    def __init__(self, opts: Mapping[str, Any] | None = None) -> None:
        opts = dict(opts or {})
        self.name: str = opts.get("name") or self.default_name
        self.extensions: Tuple[str, ...] = _normalise_extensions(
            opts.get("extensions", self.default_extensions)
        )
        self.encoding: Optional[str] = opts.get("encoding")
        self._match: Optional[Callable[[File], bool]] = opts.get("match")

    def match(self, file: File) -> bool:
        if self._match is not None:
            return bool(self._match(file))
        return file.suffix in self.extensions

    @abstractmethod
    async def render(self, file: File, context: Mapping[str, Any], done: Done) -> Optional[str]:
        """Render ``file``; call ``done(None, output)`` or ``done(error)``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def _normalise_extensions(values: Iterable[str] | str) -> Tuple[str, ...]:
    if isinstance(values, str):
        values = [values]
    normalised = []
    for value in values:
        value = value.lower()
        normalised.append(value if value.startswith(".") else f".{value}")
    return tuple(normalised)


__all__ = ["Adapter", "BaseAdapter", "Done", "adapter_attr", "validate_adapter"]
