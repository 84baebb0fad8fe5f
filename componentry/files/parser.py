"""Default parser for the files entity."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping

from ..models import File, FileCollection
from ..pipeline import Parser


def catalogue_files(data: Any) -> FileCollection:
    """Copy raw reader output into a fresh :class:`FileCollection`.

    Accepts a ``FileCollection`` (or anything exposing ``get_all``), an iterable
    of ``File`` objects, or mappings with at least a ``path`` key.
    """
    if data is None:
        return FileCollection()
    items: Iterable[Any] = data.get_all() if hasattr(data, "get_all") else data
    return FileCollection(_coerce_file(item) for item in items)


def _coerce_file(item: Any) -> File:
    if isinstance(item, File):
        return item.copy()
    if isinstance(item, Mapping):
        path = Path(item["path"])
        encoding = item.get("encoding") or "utf-8"
        contents = item.get("contents")
        if isinstance(contents, str):
            contents = contents.encode(encoding)
        return File(
            path=path,
            base=Path(item.get("base") or path.parent),
            contents=contents,
            size=int(item.get("size") or (len(contents) if contents else 0)),
            adapter=item.get("adapter"),
            encoding=encoding,
        )
    raise TypeError(f"Cannot catalogue {type(item).__name__!r} as a file")


def create_parser() -> Parser:
    return Parser([catalogue_files], name="files")


__all__ = ["catalogue_files", "create_parser"]
