"""Plain-text adapter using ``string.Template`` substitution."""

from __future__ import annotations

from string import Template
from typing import Any, Mapping, Optional

from ..logging import get_logger
from ..models import File
from .base import BaseAdapter, Done

logger = get_logger("adapters.text")


class TextAdapter(BaseAdapter):
    """Substitutes ``$name`` placeholders; unknown placeholders are left untouched."""

    default_name = "text"
    default_extensions = (".txt", ".tpl")

    async def render(self, file: File, context: Mapping[str, Any], done: Done) -> Optional[str]:
        try:
            output = Template(file.text(self.encoding)).safe_substitute(context)
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            logger.debug("Failed to render %s: %s", file.relative, exc)
            done(exc)
            return None
        done(None, output)
        return output


__all__ = ["TextAdapter"]
