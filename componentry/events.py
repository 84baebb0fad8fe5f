"""Synchronous event bus with dotted wildcard subscriptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Sequence

from .errors import require, require_callable

Listener = Callable[..., Any]


@dataclass
class _Subscription:
    pattern: str
    segments: Sequence[str]
    listener: Listener
    once: bool = False


def pattern_matches(pattern: str | Sequence[str], event: str | Sequence[str]) -> bool:
    """Return True when ``event`` matches ``pattern``.

    Both are dotted names. ``*`` matches exactly one segment and ``**`` matches
    any number of segments, including none.
    """
    pattern_parts = pattern.split(".") if isinstance(pattern, str) else list(pattern)
    event_parts = event.split(".") if isinstance(event, str) else list(event)
    return _match(pattern_parts, 0, event_parts, 0)


def _match(pattern: Sequence[str], pi: int, event: Sequence[str], ei: int) -> bool:
    while pi < len(pattern):
        part = pattern[pi]
        if part == "**":
            if pi == len(pattern) - 1:
                return True
            return any(_match(pattern, pi + 1, event, index) for index in range(ei, len(event) + 1))
        if ei >= len(event):
            return False
        if part != "*" and part != event[ei]:
            return False
        pi += 1
        ei += 1
    return ei == len(event)


class EventBus:
    """Publishes named events to exact and wildcard subscribers in subscription order."""

    def __init__(self) -> None:
        self._subscriptions: List[_Subscription] = []

    def on(self, pattern: str, listener: Listener) -> "EventBus":
        self._subscribe(pattern, listener, once=False)
        return self

    def once(self, pattern: str, listener: Listener) -> "EventBus":
        self._subscribe(pattern, listener, once=True)
        return self

    def off(self, pattern: str, listener: Listener | None = None) -> "EventBus":
        """Remove subscriptions registered under ``pattern`` (optionally for one listener)."""
        self._subscriptions = [
            sub
            for sub in self._subscriptions
            if not (sub.pattern == pattern and (listener is None or sub.listener == listener))
        ]
        return self

    def listeners(self, event: str) -> List[Listener]:
        return [sub.listener for sub in self._subscriptions if pattern_matches(sub.segments, event)]

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener matching ``event``; return True if any were called.

        Listener exceptions propagate to the emitter.
        """
        matched = [sub for sub in self._subscriptions if pattern_matches(sub.segments, event)]
        if not matched:
            return False
        spent = {id(sub) for sub in matched if sub.once}
        if spent:
            self._subscriptions = [sub for sub in self._subscriptions if id(sub) not in spent]
        for sub in matched:
            sub.listener(*args)
        return True

    def _subscribe(self, pattern: str, listener: Listener, *, once: bool) -> None:
        caller = f"{type(self).__name__}.{'once' if once else 'on'}"
        require(
            isinstance(pattern, str) and bool(pattern),
            f"{caller}: event must be a non-empty string",
            "event-invalid",
        )
        require_callable(listener, f"{caller}: listener must be callable", "listener-invalid")
        self._subscriptions.append(
            _Subscription(pattern=pattern, segments=tuple(pattern.split(".")), listener=listener, once=once)
        )


__all__ = ["EventBus", "pattern_matches"]
