"""Entity interfaces: method registries that generate queryable result objects."""

from __future__ import annotations

from functools import partial
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

from .errors import require, require_callable
from .models import EntityKind

Handler = Callable[..., Any]

DATA_KEY = "data"


class EntityResult:
    """Result of a pipeline run, exposing registered methods bound to its data.

    Handlers receive the result as their first argument. Dotted method names
    such as ``render.html`` are reachable as ``result.render.html(...)`` or via
    :meth:`call`. Results are read-only once generated.
    """

    __slots__ = ("kind", "data", "_methods", "_files")

    def __init__(self, kind: EntityKind, data: Any, methods: Mapping[str, Handler]) -> None:
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "_methods", dict(methods))
        object.__setattr__(self, "_files", None)

    @property
    def methods(self) -> Mapping[str, Handler]:
        return MappingProxyType(self._methods)

    @property
    def files(self) -> Optional["EntityResult"]:
        """The files result this components result was derived from, once linked."""
        return self._files

    def has_method(self, name: str) -> bool:
        return name in self._methods

    def get_method(self, name: str) -> Handler:
        try:
            handler = self._methods[name]
        except KeyError:
            raise AttributeError(f"{self.kind.value} result has no method '{name}'") from None
        return partial(handler, self)

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        return self.get_method(name)(*args, **kwargs)

    def as_dict(self) -> Dict[str, Any]:
        return {DATA_KEY: self.data}

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        methods = self._methods
        if name in methods:
            return partial(methods[name], self)
        prefix = f"{name}."
        if any(key.startswith(prefix) for key in methods):
            return _MethodNamespace(self, name)
        raise AttributeError(f"{self.kind.value} result has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __iter__(self) -> Iterator[Any]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityResult):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.data == other.data
            and set(self._methods) == set(other._methods)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"EntityResult(kind={self.kind.value!r}, methods={sorted(self._methods)!r})"


class _MethodNamespace:
    """Attribute path over dotted method names, e.g. ``result.render``."""

    def __init__(self, result: EntityResult, prefix: str) -> None:
        self._result = result
        self._prefix = prefix

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._result, f"{self._prefix}.{name}")

    def __dir__(self):
        prefix = f"{self._prefix}."
        return sorted({key[len(prefix):].split(".")[0] for key in self._result.methods if key.startswith(prefix)})


# Method names that would be shadowed by attributes of the result object.
RESERVED_NAMES = frozenset(name for name in dir(EntityResult) if not name.startswith("_"))


def link_files(components: EntityResult, files: EntityResult) -> EntityResult:
    """Attach the files result to a components result; allowed once."""
    if components._files is not None:
        raise RuntimeError("components result is already linked to a files result")
    object.__setattr__(components, "_files", files)
    return components


class EntityInterface:
    """Named-method registry for one entity kind."""

    def __init__(self, kind: EntityKind | str, *, owner: Any = None) -> None:
        self.kind = EntityKind(kind)
        self.owner = owner
        self._methods: Dict[str, Handler] = {}

    @property
    def methods(self) -> Mapping[str, Handler]:
        return MappingProxyType(self._methods)

    def add_method(self, name: str, handler: Handler) -> "EntityInterface":
        """Register ``handler`` under ``name``; an existing method of that name is replaced.

        Names whose first segment is in :data:`RESERVED_NAMES` are rejected.
        """
        require(
            isinstance(name, str) and bool(name),
            f"{type(self).__name__}.add_method: name must be a non-empty string",
            "name-invalid",
        )
        require(
            name.split(".", 1)[0] not in RESERVED_NAMES,
            f"{type(self).__name__}.add_method: '{name}' clashes with a built-in result attribute",
            "name-invalid",
        )
        require_callable(handler, f"{type(self).__name__}.add_method: handler must be callable", "handler-invalid")
        self._methods[name] = handler
        return self

    def has_method(self, name: str) -> bool:
        return name in self._methods

    def get_method(self, name: str) -> Optional[Handler]:
        return self._methods.get(name)

    def generate(self, seed: Mapping[str, Any]) -> EntityResult:
        """Build a result object over ``seed["data"]`` with a snapshot of the current methods."""
        data = seed.get(DATA_KEY) if isinstance(seed, Mapping) else seed
        return EntityResult(self.kind, data, self._methods)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, methods={sorted(self._methods)!r})"


__all__ = ["DATA_KEY", "RESERVED_NAMES", "EntityInterface", "EntityResult", "Handler", "link_files"]
