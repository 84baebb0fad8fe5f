"""Configuration defaults and loading for componentry (componentry.yml)."""

from __future__ import annotations

import copy
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping

import yaml

from .errors import ConfigError

CONFIG_FILENAME = "componentry.yml"

DEFAULTS: Dict[str, Any] = {
    "src": None,
    "parsers": {},
    "interfaces": {},
    "adapters": [],
    "extensions": [],
    "fs": {
        "exclude": [
            ".git",
            ".hg",
            ".svn",
            ".venv",
            "node_modules",
            "__pycache__",
            ".DS_Store",
            "Thumbs.db",
        ],
        "encoding": "utf-8",
    },
    "components": {
        "marker": "@",
        "config_names": ["component.yml", "component.yaml", "component.json"],
    },
    "logging": {
        "level": "warning",
        "file": None,
    },
}


def deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``overrides`` merged over ``base``; nested mappings merge, other values replace."""
    merged: Dict[str, Any] = {key: _copy_value(value) for key, value in base.items()}
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def freeze(value: Any) -> Any:
    """Return a read-only view of nested dicts and lists; other values are kept as-is."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(freeze(item) for item in value)
    return value


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load configuration overrides from disk.

    ``config_path`` may point at the file itself or at a directory containing
    ``componentry.yml``. A missing file yields an empty mapping. Relative ``src``
    entries and ``logging.file`` are resolved against the directory holding the file.
    """
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return {}

    text = config_file.read_text(encoding="utf-8")
    if not text.strip():
        return {}

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {config_file.name}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    src = data.get("src")
    if src is not None:
        data["src"] = _resolve_sources(config_file.parent, src)
    logging_options = data.get("logging")
    if logging_options is not None:
        data["logging"] = _resolve_logging(config_file.parent, logging_options)
    return data


def _copy_value(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return copy.deepcopy(value)
    return value


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_sources(root: Path, src: Any) -> list[str]:
    entries = [src] if isinstance(src, str) else src
    if not isinstance(entries, list) or not all(isinstance(item, str) for item in entries):
        raise ConfigError("'src' must be a path or a list of paths")
    return [str(root / Path(entry).expanduser()) for entry in entries]


def _resolve_logging(root: Path, options: Any) -> Dict[str, Any]:
    if not isinstance(options, dict):
        raise ConfigError("'logging' must be a mapping")
    resolved = dict(options)
    log_file = resolved.get("file")
    if log_file is not None:
        if not isinstance(log_file, str):
            raise ConfigError("'logging.file' must be a path")
        resolved["file"] = str(root / Path(log_file).expanduser())
    return resolved


__all__ = ["CONFIG_FILENAME", "DEFAULTS", "deep_merge", "freeze", "load_config"]
