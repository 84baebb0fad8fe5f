"""Orchestrates the two-phase files/components parse."""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass, field
from functools import partial
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

from . import components as components_entity
from . import files as files_entity
from .adapters import Adapter, adapter_attr, get_adapter_factory, validate_adapter
from .config import DEFAULTS, deep_merge, freeze
from .errors import PreconditionError, require, require_callable
from .events import EventBus
from .extensions import load_extension
from .files.plugins import adapter_plugin
from .fs import normalize_paths, read_dirs
from .interface import DATA_KEY, EntityInterface, EntityResult, link_files
from .logging import get_logger
from .models import EntityKind, File
from .pipeline import Parser, Step
from .transformer import transform

EVENT_PARSE_START = "parse.start"
EVENT_PARSE_COMPLETE = "parse.complete"

ParseCallback = Callable[..., Any]
Reader = Callable[[List[str]], Any]
Transformer = Callable[[List[File]], Any]

_PARSER_FACTORIES: Dict[EntityKind, Callable[[], Parser]] = {
    EntityKind.FILES: files_entity.create_parser,
    EntityKind.COMPONENTS: components_entity.create_parser,
}

_INTERFACE_FACTORIES: Dict[EntityKind, Callable[[Any], EntityInterface]] = {
    EntityKind.FILES: files_entity.create_interface,
    EntityKind.COMPONENTS: components_entity.create_interface,
}

logger = get_logger("orchestrator")


@dataclass
class _InstanceState:
    config: Mapping[str, Any]
    reader: Reader
    transformer: Transformer
    src: List[str] = field(default_factory=list)
    parsers: Dict[EntityKind, Parser] = field(default_factory=dict)
    interfaces: Dict[EntityKind, EntityInterface] = field(default_factory=dict)
    adapters: Dict[str, Adapter | Mapping[str, Any]] = field(default_factory=dict)
    default_adapter: Optional[str] = None


class Orchestrator(EventBus):
    """Turns source directories into linked files and components results.

    Configure an instance with :meth:`add_src`, :meth:`add_plugin`,
    :meth:`add_method`, :meth:`add_adapter` and :meth:`add_extension`, then call
    :meth:`parse` (callback style) or await :meth:`run`. Emits ``parse.start``
    and ``parse.complete``.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        *,
        reader: Reader | None = None,
        transformer: Transformer | None = None,
    ) -> None:
        require(
            config is None or isinstance(config, Mapping),
            "Orchestrator: config must be a mapping",
            "config-invalid",
        )
        super().__init__()

        merged = deep_merge(DEFAULTS, config or {})
        fs_options = merged.get("fs") or {}
        component_options = merged.get("components") or {}
        self.__state = _InstanceState(
            config=freeze(merged),
            reader=reader
            or partial(
                read_dirs,
                exclude=list(fs_options.get("exclude") or []),
                encoding=fs_options.get("encoding"),
            ),
            transformer=transformer
            or partial(
                transform,
                marker=component_options.get("marker", ""),
                config_names=tuple(component_options.get("config_names") or ()),
            ),
        )

        if merged.get("src"):
            self.add_src(merged["src"])

        parser_overrides = merged.get("parsers") or {}
        interface_overrides = merged.get("interfaces") or {}
        for kind in EntityKind:
            self.__state.parsers[kind] = self._resolve_parser(kind, parser_overrides.get(kind.value))
            self.__state.interfaces[kind] = self._resolve_interface(
                kind, interface_overrides.get(kind.value)
            )

        for entry in merged.get("adapters") or []:
            self._register_configured_adapter(entry)
        for entry in merged.get("extensions") or []:
            self.add_extension(load_extension(entry))

    # ------------------------------------------------------------------
    # Mutation

    def add_src(self, src: Any) -> "Orchestrator":
        """Append one source path or a sequence of them; duplicates are kept."""
        self.__state.src.extend(normalize_paths(src))
        return self

    def add_plugin(self, plugin: Step, target: EntityKind | str = EntityKind.COMPONENTS) -> "Orchestrator":
        require_callable(plugin, "Orchestrator.add_plugin: plugin must be callable", "plugin-invalid")
        kind = _coerce_kind(target, "Orchestrator.add_plugin", "target", "target-invalid")
        self.__state.parsers[kind].use(plugin)
        return self

    def add_method(
        self,
        name: str,
        handler: Callable[..., Any],
        target: EntityKind | str = EntityKind.COMPONENTS,
    ) -> "Orchestrator":
        require(
            isinstance(name, str) and bool(name),
            "Orchestrator.add_method: name must be a non-empty string",
            "name-invalid",
        )
        require_callable(handler, "Orchestrator.add_method: handler must be callable", "handler-invalid")
        kind = _coerce_kind(target, "Orchestrator.add_method", "target", "target-invalid")
        self.__state.interfaces[kind].add_method(name, handler)
        return self

    def add_extension(self, extension: Callable[["Orchestrator"], Any]) -> "Orchestrator":
        """Call ``extension(self)`` right away; its exceptions propagate."""
        require_callable(
            extension, "Orchestrator.add_extension: extension must be callable", "extension-invalid"
        )
        extension(self)
        return self

    def add_adapter(
        self,
        adapter: Adapter | Mapping[str, Any] | str,
        opts: Mapping[str, Any] | None = None,
    ) -> "Orchestrator":
        """Register a render adapter, given as an object, a mapping or a built-in name."""
        if isinstance(adapter, str):
            factory = get_adapter_factory(adapter)
            if factory is not None:
                adapter = factory(dict(opts or {}))
        validate_adapter(adapter)

        name: str = adapter_attr(adapter, "name")
        self.add_plugin(adapter_plugin(name, adapter_attr(adapter, "match")), EntityKind.FILES)
        self.add_method(f"render.{name}", _render_method(name, adapter_attr(adapter, "render")))

        state = self.__state
        state.adapters[name] = adapter
        if state.default_adapter is None:
            state.default_adapter = name
        logger.debug("Registered adapter '%s'", name)
        return self

    # ------------------------------------------------------------------
    # Processing

    def parse(self, callback: ParseCallback) -> Optional["asyncio.Task[None]"]:
        """Read, process and link all sources, reporting to ``callback``.

        On success ``callback(None, components, files)`` is called; on failure
        ``callback(error)``. Inside a running event loop the work is scheduled
        and the task returned; otherwise it runs to completion before returning.
        """
        require_callable(callback, "Orchestrator.parse: callback must be callable", "callback-invalid")
        self.emit(EVENT_PARSE_START)

        coroutine = self._parse(callback)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coroutine)
            return None
        return loop.create_task(coroutine)

    async def run(self) -> Tuple[EntityResult, EntityResult]:
        """Awaitable form of :meth:`parse` returning ``(components, files)`` or raising."""
        self.emit(EVENT_PARSE_START)
        components, files = await self._run_phases()
        self.emit(EVENT_PARSE_COMPLETE, components, files)
        return components, files

    def process(self, target: EntityKind | str, data: Any = None) -> Awaitable[EntityResult]:
        """Run ``data`` through the ``target`` parser and interface.

        ``target`` is checked immediately; pipeline failures surface when the
        returned awaitable is awaited.
        """
        parser = self.get_parser(target)
        interface = self.get_interface(target)
        return self._process(parser, interface, [] if data is None else data)

    def get_parser(self, name: EntityKind | str) -> Parser:
        kind = _coerce_kind(name, "Orchestrator.get_parser", "parser", "parser-invalid")
        return self.__state.parsers[kind]

    def get_interface(self, name: EntityKind | str) -> EntityInterface:
        kind = _coerce_kind(name, "Orchestrator.get_interface", "interface", "interface-invalid")
        return self.__state.interfaces[kind]

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def interfaces(self) -> Mapping[EntityKind, EntityInterface]:
        return MappingProxyType(self.__state.interfaces)

    @property
    def parsers(self) -> Mapping[EntityKind, Parser]:
        return MappingProxyType(self.__state.parsers)

    @property
    def adapters(self) -> Mapping[str, Adapter | Mapping[str, Any]]:
        return MappingProxyType(self.__state.adapters)

    @property
    def default_adapter(self) -> Any:
        """The adapter registered under the first name ever added, if any."""
        name = self.__state.default_adapter
        if name is None:
            return None
        return self.__state.adapters.get(name)

    @property
    def config(self) -> Mapping[str, Any]:
        return self.__state.config

    @property
    def src(self) -> Tuple[str, ...]:
        return tuple(self.__state.src)

    # ------------------------------------------------------------------
    # Internal helpers

    async def _parse(self, callback: ParseCallback) -> None:
        try:
            components, files = await self._run_phases()
        except Exception as exc:
            logger.debug("Parse failed: %s", exc, exc_info=True)
            callback(exc)
            return
        self.emit(EVENT_PARSE_COMPLETE, components, files)
        callback(None, components, files)

    async def _run_phases(self) -> Tuple[EntityResult, EntityResult]:
        state = self.__state
        sources = list(state.src)
        logger.debug("Reading %d source path(s)", len(sources))
        raw = state.reader(sources)
        if inspect.isawaitable(raw):
            raw = await raw

        files = await self.process(EntityKind.FILES, raw)
        logger.debug("Processed %d file(s)", _safe_len(files))

        descriptors = state.transformer(files.get_all())
        if inspect.isawaitable(descriptors):
            descriptors = await descriptors

        components = await self.process(EntityKind.COMPONENTS, descriptors)
        logger.debug("Processed %d component(s)", _safe_len(components))

        link_files(components, files)
        return components, files

    @staticmethod
    async def _process(parser: Parser, interface: EntityInterface, data: Any) -> EntityResult:
        output = await parser.process(data)
        result = interface.generate({DATA_KEY: output})
        if inspect.isawaitable(result):
            result = await result
        return result

    def _resolve_parser(self, kind: EntityKind, override: Any) -> Parser:
        if override is None:
            return _PARSER_FACTORIES[kind]()
        if hasattr(override, "use") and hasattr(override, "process"):
            return override
        if callable(override):
            return override()
        raise PreconditionError(
            f"Orchestrator: parsers.{kind.value} must be a parser or a parser factory", "parser-invalid"
        )

    def _resolve_interface(self, kind: EntityKind, override: Any) -> EntityInterface:
        if override is None:
            return _INTERFACE_FACTORIES[kind](self)
        if hasattr(override, "add_method") and hasattr(override, "generate"):
            return override
        if callable(override):
            return override(self)
        raise PreconditionError(
            f"Orchestrator: interfaces.{kind.value} must be an interface or an interface factory",
            "interface-invalid",
        )

    def _register_configured_adapter(self, entry: Any) -> None:
        if isinstance(entry, Mapping) and "render" not in entry:
            self.add_adapter(entry.get("name"), entry.get("opts"))
        else:
            self.add_adapter(entry)

    def __repr__(self) -> str:
        return f"Orchestrator(src={list(self.__state.src)!r}, adapters={list(self.__state.adapters)!r})"


def _coerce_kind(value: Any, caller: str, label: str, code: str) -> EntityKind:
    try:
        return EntityKind(value)
    except (ValueError, TypeError):
        choices = ", ".join(EntityKind.values())
        raise PreconditionError(f"{caller}: '{label}' must be one of [{choices}]", code) from None


def _render_method(name: str, render: Callable[..., Any]) -> Callable[..., Any]:
    def render_with_adapter(components: EntityResult, file: Any, context: Any, done: Any) -> Any:
        require(
            isinstance(file, File),
            f"{name}.render: requires a 'file' argument of type File",
            "file-invalid",
        )
        require(
            isinstance(context, Mapping),
            f"{name}.render: requires a 'context' argument of type mapping",
            "context-invalid",
        )
        require_callable(done, f"{name}.render: requires a 'done' callback", "done-invalid")
        return render(file, context, done)

    render_with_adapter.__name__ = f"render_{name}"
    return render_with_adapter


def _safe_len(result: Any) -> int:
    try:
        return len(result)
    except TypeError:
        return 0


__all__ = ["EVENT_PARSE_COMPLETE", "EVENT_PARSE_START", "Orchestrator"]
