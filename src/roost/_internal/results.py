"""Per-step results for navigation sub-tasks.

The router runs a page load and every module load as independent steps.
Each step returns a ``StepResult`` instead of raising, so one failure
never cancels its siblings in the same task group.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class StepResult:
    """Outcome of one navigation step."""

    value: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def run_step(func: Callable[..., Awaitable[Any]], *args: Any) -> StepResult:
    """Await ``func(*args)`` and capture its outcome."""
    try:
        value = await func(*args)
    except Exception as exc:
        return StepResult(error=exc)
    return StepResult(value=value)
