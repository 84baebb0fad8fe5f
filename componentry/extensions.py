"""Resolution of extension references given in configuration."""

from __future__ import annotations

from importlib import import_module
from typing import Any, Callable

from .errors import require, require_callable

Extension = Callable[[Any], Any]


def load_extension(ref: str | Extension) -> Extension:
    """Return the extension callable named by ``ref``.

    ``ref`` is either a callable or a ``"package.module:attribute"`` string
    (``"package.module.attribute"`` is accepted too). Import errors propagate.
    """
    if callable(ref):
        return ref
    require(
        isinstance(ref, str) and bool(ref.strip()),
        "load_extension: extension must be a callable or an import path",
        "extension-invalid",
    )
    module_name, sep, attribute = ref.strip().partition(":")
    if not sep:
        module_name, _, attribute = module_name.rpartition(".")
    require(
        bool(module_name) and bool(attribute),
        f"load_extension: '{ref}' is not a valid import path",
        "extension-invalid",
    )
    target: Any = import_module(module_name)
    for part in attribute.split("."):
        target = getattr(target, part)
    return require_callable(target, f"load_extension: '{ref}' is not callable", "extension-invalid")


__all__ = ["Extension", "load_extension"]
