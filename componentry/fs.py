"""Filesystem reading for source directories."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .config import DEFAULTS
from .errors import require
from .logging import get_logger
from .models import File, FileCollection

logger = get_logger("fs")

DEFAULT_EXCLUDE: Sequence[str] = tuple(DEFAULTS["fs"]["exclude"])
DEFAULT_ENCODING: str = DEFAULTS["fs"]["encoding"]


def normalize_paths(src: str | os.PathLike | Iterable[str | os.PathLike]) -> List[str]:
    """Return ``src`` as a list of absolute, user-expanded path strings."""
    if isinstance(src, (str, os.PathLike)):
        entries: List[object] = [src]
    else:
        require(
            isinstance(src, Iterable),
            "add_src: src must be a path or a sequence of paths",
            "src-invalid",
        )
        entries = list(src)
    normalised: List[str] = []
    for entry in entries:
        require(
            isinstance(entry, (str, os.PathLike)),
            "add_src: src must be a path or a sequence of paths",
            "src-invalid",
        )
        normalised.append(str(Path(entry).expanduser().resolve()))
    return normalised


def _is_excluded(rel_path: str, patterns: Sequence[str]) -> bool:
    parts = rel_path.split("/")
    for pattern in patterns:
        if "/" in pattern:
            if fnmatchcase(rel_path, pattern.strip("/")):
                return True
            continue
        if any(fnmatchcase(part, pattern) for part in parts):
            return True
    return False


def _iter_files(root: Path, patterns: Sequence[str]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept = []
        for name in sorted(dirnames):
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if not _is_excluded(rel_path, patterns):
                kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _is_excluded(rel_path, patterns):
                continue
            yield current_dir / filename


def scan_dirs(
    paths: Sequence[str | os.PathLike],
    exclude: Sequence[str] | None = None,
    encoding: str = DEFAULT_ENCODING,
) -> FileCollection:
    """Read every file below ``paths`` in walk order, skipping excluded names.

    Contents are kept as bytes; ``encoding`` is recorded on each file for later decoding.
    """
    patterns = tuple(DEFAULT_EXCLUDE if exclude is None else exclude)
    files: List[File] = []
    for raw in paths:
        root = Path(raw).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Source path not found: {raw}")
        if not root.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {raw}")
        count = 0
        for path in _iter_files(root, patterns):
            contents = path.read_bytes()
            files.append(
                File(path=path, base=root, contents=contents, size=len(contents), encoding=encoding)
            )
            count += 1
        logger.debug("Read %d files from %s", count, root)
    return FileCollection(files)


async def read_dirs(
    paths: Sequence[str | os.PathLike],
    *,
    exclude: Sequence[str] | None = None,
    encoding: str | None = None,
) -> FileCollection:
    """Read the source directories as a coroutine so it can be awaited by the orchestrator."""
    return scan_dirs(list(paths), exclude, encoding or DEFAULT_ENCODING)


__all__ = ["normalize_paths", "read_dirs", "scan_dirs"]
