"""Jinja2 render adapter."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, Undefined

from ..logging import get_logger
from ..models import File
from .base import BaseAdapter, Done

logger = get_logger("adapters.jinja")


class JinjaAdapter(BaseAdapter):
    """Renders templates with an async Jinja2 environment rooted at the file's source directory.

    Options: ``name``, ``extensions``, ``match``, ``encoding``, ``globals``,
    ``filters``, ``autoescape`` and ``strict`` (raise on undefined variables).
    """

    default_name = "jinja"
    default_extensions = (".j2", ".jinja", ".html")

    def __init__(self, opts: Mapping[str, Any] | None = None) -> None:
        super().__init__(opts)
        opts = dict(opts or {})
        self.globals: Dict[str, Any] = dict(opts.get("globals") or {})
        self.filters: Dict[str, Any] = dict(opts.get("filters") or {})
        self.autoescape: bool = bool(opts.get("autoescape", False))
        self.strict: bool = bool(opts.get("strict", False))
        self._environments: Dict[Path, Environment] = {}

    def environment(self, base: Path) -> Environment:
        env = self._environments.get(base)
        if env is None:
            env = Environment(
                loader=FileSystemLoader(str(base)),
                enable_async=True,
                autoescape=self.autoescape,
                undefined=StrictUndefined if self.strict else Undefined,
            )
            env.globals.update(self.globals)
            env.filters.update(self.filters)
            self._environments[base] = env
        return env

    async def render(self, file: File, context: Mapping[str, Any], done: Done) -> Optional[str]:
        env = self.environment(file.base)
        try:
            template = env.from_string(file.text(self.encoding))
            output = await template.render_async(**context)
        except (TemplateError, OSError, UnicodeDecodeError) as exc:
            logger.debug("Failed to render %s: %s", file.relative, exc)
            done(exc)
            return None
        done(None, output)
        return output


__all__ = ["JinjaAdapter"]
