"""Ordered asynchronous parser pipelines."""

from __future__ import annotations

import inspect
from typing import Any, Callable, List, Tuple

from .errors import require_callable
from .logging import get_logger

Step = Callable[[Any], Any]

logger = get_logger("pipeline")


class Parser:
    """Threads data through registered steps, one at a time, in registration order.

    A step receives the accumulated data and returns the next value, either
    directly or as an awaitable. Returning ``None`` keeps the current data, which
    lets steps mutate in place. The first step to raise aborts the run.
    """

    def __init__(self, steps: List[Step] | None = None, *, name: str = "parser") -> None:
        self.name = name
        self._steps: List[Step] = []
        for step in steps or []:
            self.use(step)

    @property
    def steps(self) -> Tuple[Step, ...]:
        return tuple(self._steps)

    def use(self, step: Step) -> "Parser":
        """Append a step. Registering the same step twice runs it twice."""
        require_callable(step, f"{type(self).__name__}.use: step must be callable", "plugin-invalid")
        self._steps.append(step)
        return self

    async def process(self, data: Any) -> Any:
        steps = list(self._steps)
        logger.debug("Running %s pipeline with %d step(s)", self.name, len(steps))
        for step in steps:
            result = step(data)
            if inspect.isawaitable(result):
                result = await result
            if result is not None:
                data = result
        return data

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, steps={len(self._steps)})"


__all__ = ["Parser", "Step"]
