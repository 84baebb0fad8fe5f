"""Derives raw component descriptors from the resolved file graph."""

from __future__ import annotations

import json
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, List, Sequence, Tuple

import yaml

from .config import DEFAULTS
from .errors import TransformError
from .logging import get_logger
from .models import File

logger = get_logger("transformer")

DEFAULT_MARKER: str = DEFAULTS["components"]["marker"]
DEFAULT_CONFIG_NAMES: Tuple[str, ...] = tuple(DEFAULTS["components"]["config_names"])

_Key = Tuple[Path, str]


def transform(
    files: Iterable[File],
    *,
    marker: str = DEFAULT_MARKER,
    config_names: Sequence[str] = DEFAULT_CONFIG_NAMES,
) -> List[Dict[str, Any]]:
    """Group files into component descriptors.

    A directory is a component when its name starts with ``marker`` or when it
    directly holds one of ``config_names``. Each file belongs to its nearest
    enclosing component directory; files outside any component are skipped.
    Component config files are parsed into the descriptor's ``config`` and are
    not listed among its files.
    """
    files = list(files)
    config_files: Dict[_Key, File] = {}
    for file in files:
        if file.name in config_names:
            config_files.setdefault((file.base, file.dirname), file)

    def is_component(base: Path, directory: str) -> bool:
        if not directory:
            return False
        if marker and PurePosixPath(directory).name.startswith(marker):
            return True
        return (base, directory) in config_files

    owned: Dict[_Key, List[File]] = {}
    order: List[_Key] = []
    for file in files:
        owner = _nearest_component(file, is_component)
        if owner is None:
            continue
        if owner not in owned:
            owned[owner] = []
            order.append(owner)
        if config_files.get(owner) is file:
            continue
        owned[owner].append(file)

    descriptors: List[Dict[str, Any]] = []
    seen: Dict[str, str] = {}
    for base, directory in order:
        config = _load_component_config(config_files.get((base, directory)))
        dirname = PurePosixPath(directory).name
        default_name = dirname[len(marker):] if marker and dirname.startswith(marker) else dirname
        name = str(config.get("name") or default_name)
        if name in seen:
            logger.warning("Component name '%s' used by both %s and %s", name, seen[name], directory)
        seen.setdefault(name, directory)
        descriptors.append(
            {
                "name": name,
                "path": base / directory,
                "relative": directory,
                "config": config,
                "files": owned[(base, directory)],
            }
        )
    logger.debug("Derived %d components from %d files", len(descriptors), len(files))
    return descriptors


def _nearest_component(file: File, is_component) -> _Key | None:
    directory = PurePosixPath(file.dirname) if file.dirname else None
    while directory is not None and str(directory) not in ("", "."):
        if is_component(file.base, directory.as_posix()):
            return (file.base, directory.as_posix())
        parent = directory.parent
        directory = parent if parent != directory else None
    return None


def _load_component_config(file: File | None) -> Dict[str, Any]:
    if file is None:
        return {}
    try:
        text = file.text()
        if file.suffix == ".json":
            data = json.loads(text) if text.strip() else {}
        else:
            data = yaml.safe_load(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise TransformError(f"Failed to parse component config {file.relative}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TransformError(f"Component config {file.relative} must contain a mapping at the root")
    return data


__all__ = ["transform"]
