"""Exception types raised by componentry."""

from __future__ import annotations

from typing import Any, Callable


class ComponentryError(Exception):
    """Base class for componentry errors."""


class PreconditionError(ComponentryError, TypeError):
    """Raised synchronously when a call violates its argument contract.

    ``code`` is a short stable identifier for the violated contract, e.g.
    ``target-invalid`` or ``adapter-invalid``. The code is also appended to the
    message in square brackets so it shows up in tracebacks.
    """

    def __init__(self, message: str, code: str) -> None:
        super().__init__(f"{message} [{code}]")
        self.code = code


class ConfigError(ComponentryError):
    """Raised when a configuration file cannot be read or parsed."""


class TransformError(ComponentryError):
    """Raised when component descriptors cannot be derived from the file graph."""


def require(condition: bool, message: str, code: str) -> None:
    if not condition:
        raise PreconditionError(message, code)


def require_callable(value: Any, message: str, code: str) -> Callable[..., Any]:
    require(callable(value), message, code)
    return value


__all__ = [
    "ComponentryError",
    "ConfigError",
    "PreconditionError",
    "TransformError",
    "require",
    "require_callable",
]
