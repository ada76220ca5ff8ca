"""Resilience – TimeoutOptions and TimeoutPolicy.

Two enforcement modes:

``COOPERATIVE``
    On expiry the operation's task is cancelled and the policy waits for
    it to unwind. asyncio cancellation is delivered at the operation's
    next ``await``; blocking synchronous code is not interrupted.

``RACE``
    The policy stops waiting and returns at once; the operation keeps
    running detached in the background and its eventual result is
    discarded. Nothing about its side effects is guaranteed.

In both modes a cancellation of the execution context aborts the wait
the same way the deadline does.
"""
from __future__ import annotations

import asyncio
import dataclasses
from enum import Enum
from typing import Any, Callable, ClassVar, TypeVar

from mp_resilience.config.settings import Settings
from mp_resilience.config.validation import InvalidSettingValueError
from mp_resilience.observability.logging import get_logger
from mp_resilience.resilience.context import ExecutionContext
from mp_resilience.resilience.errors import ErrorKind
from mp_resilience.resilience.outcome import Failure, Outcome
from mp_resilience.resilience.policy import Policy, cancelled, capture, fire_hook
from mp_resilience.resilience.timeouts.errors import TimeoutRejectedError

T = TypeVar("T")
logger = get_logger(__name__)


class TimeoutMode(str, Enum):
    COOPERATIVE = "COOPERATIVE"
    RACE = "RACE"


@dataclasses.dataclass
class TimeoutOptions(Settings):
    """Configuration for timeout enforcement."""

    _prefix: ClassVar[str] = "RESILIENCE_TIMEOUT"

    timeout_seconds: float
    mode: TimeoutMode = TimeoutMode.COOPERATIVE
    on_timeout: Callable[[ExecutionContext, float], Any] | None = None

    def _validate(self) -> None:
        self._require("timeout_seconds", self.timeout_seconds > 0, "must be > 0")
        if not isinstance(self.mode, TimeoutMode):
            try:
                self.mode = TimeoutMode(str(self.mode).upper())
            except ValueError as exc:
                raise InvalidSettingValueError("mode", self.mode, "expected COOPERATIVE or RACE") from exc


class TimeoutPolicy(Policy[T]):
    """Bounds the duration of an operation."""

    def __init__(self, options: TimeoutOptions, *, name: str | None = None) -> None:
        super().__init__(name)
        self.options = options
        self._detached: set[asyncio.Task[Any]] = set()

    @property
    def timeout_seconds(self) -> float:
        return self.options.timeout_seconds

    @property
    def detached_count(self) -> int:
        """Operations abandoned in race mode that are still running."""
        return len(self._detached)

    async def _execute(self, operation: Callable[[], Any], context: ExecutionContext) -> Outcome[T]:
        task = asyncio.ensure_future(capture(operation))
        cancel_waiter = asyncio.ensure_future(context.cancellation.wait())
        try:
            done, _ = await asyncio.wait(
                {task, cancel_waiter},
                timeout=self.options.timeout_seconds,
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            cancel_waiter.cancel()

        if task in done:
            return task.result()

        await self._abandon(task)
        if cancel_waiter in done:
            return cancelled(f"Execution cancelled while '{self.name}' was waiting")

        logger.warning(
            "timeout.rejected",
            policy=self.name,
            timeout_seconds=self.options.timeout_seconds,
            mode=self.options.mode.value,
        )
        fire_hook(self.options.on_timeout, context, self.options.timeout_seconds)
        return Failure(ErrorKind.TIMEOUT_REJECTED, TimeoutRejectedError(self.options.timeout_seconds))

    async def _abandon(self, task: asyncio.Task[Any]) -> None:
        if self.options.mode is TimeoutMode.RACE:
            self._detached.add(task)
            task.add_done_callback(self._detached.discard)
            return
        task.cancel()
        await asyncio.wait({task})


__all__ = ["TimeoutMode", "TimeoutOptions", "TimeoutPolicy"]
