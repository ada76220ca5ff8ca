"""Resilience – CircuitBreakerPolicy implementation."""
from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable, NamedTuple, TypeVar

from mp_resilience.kernel.time import Clock, SystemClock
from mp_resilience.observability.logging import get_logger
from mp_resilience.resilience.circuit_breaker.errors import CircuitOpenError
from mp_resilience.resilience.circuit_breaker.policy import CircuitBreakerOptions
from mp_resilience.resilience.circuit_breaker.state import CircuitBreakerState
from mp_resilience.resilience.context import ExecutionContext
from mp_resilience.resilience.errors import ErrorKind
from mp_resilience.resilience.outcome import Failure, Outcome
from mp_resilience.resilience.policy import Policy, capture, fire_hook, handles

T = TypeVar("T")
logger = get_logger(__name__)


class _Transition(NamedTuple):
    state: CircuitBreakerState
    outcome: Outcome[Any] | None = None


class CircuitBreakerPolicy(Policy[T]):
    """Thread-safe circuit breaker.

    Transitions are committed under a lock; notification hooks run after
    the lock is released so a hook may safely inspect or call the breaker.
    OPEN becomes HALF_OPEN lazily, on the first call or ``state`` read
    after ``break_duration`` has elapsed. Exactly one trial call is
    admitted while HALF_OPEN.
    """

    def __init__(
        self,
        options: CircuitBreakerOptions | None = None,
        *,
        name: str | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(name)
        self.options = options or CircuitBreakerOptions()
        self._clock = clock or SystemClock()
        self._state = CircuitBreakerState.CLOSED
        self._failure_count = 0
        self._opened_at: float | None = None
        self._trial_in_flight = False
        self._samples: deque[tuple[float, bool]] = deque()
        self._last_outcome: Outcome[Any] | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> CircuitBreakerState:
        with self._lock:
            transition = self._maybe_half_open()
            state = self._state
        self._notify(transition)
        return state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def last_outcome(self) -> Outcome[Any] | None:
        return self._last_outcome

    @property
    def opened_at(self) -> float | None:
        return self._opened_at

    async def _execute(self, operation: Callable[[], Any], context: ExecutionContext) -> Outcome[T]:  # noqa: ARG002
        rejection: CircuitOpenError | None = None
        is_trial = False
        with self._lock:
            transition = self._maybe_half_open()
            if self._state is CircuitBreakerState.OPEN:
                rejection = CircuitOpenError(self.name, retry_after_seconds=self._remaining_break())
            elif self._state is CircuitBreakerState.HALF_OPEN:
                if self._trial_in_flight:
                    rejection = CircuitOpenError(
                        self.name, f"Circuit breaker '{self.name}' is HALF_OPEN with a trial call in flight"
                    )
                else:
                    self._trial_in_flight = True
                    is_trial = True
        self._notify(transition)

        if rejection is not None:
            logger.debug("circuit_breaker.rejected", name=self.name, retry_after=rejection.retry_after_seconds)
            return Failure(ErrorKind.CIRCUIT_OPEN_REJECTED, rejection)

        outcome: Outcome[T] | None = None
        try:
            outcome = await capture(operation)
        finally:
            with self._lock:
                if is_trial:
                    self._trial_in_flight = False
                transition = self._record(outcome, is_trial) if outcome is not None else None
            self._notify(transition)
        return outcome

    # ------------------------------------------------------------------
    # State machine (call with the lock held)
    # ------------------------------------------------------------------

    def _remaining_break(self) -> float:
        if self._opened_at is None:
            return 0.0
        return max(0.0, self._opened_at + self.options.break_duration - self._clock.monotonic())

    def _maybe_half_open(self) -> _Transition | None:
        if (
            self._state is CircuitBreakerState.OPEN
            and self._opened_at is not None
            and self._clock.monotonic() - self._opened_at >= self.options.break_duration
        ):
            self._move(CircuitBreakerState.HALF_OPEN)
            return _Transition(CircuitBreakerState.HALF_OPEN)
        return None

    def _record(self, outcome: Outcome[Any], is_trial: bool) -> _Transition | None:
        opts = self.options
        self._last_outcome = outcome
        failed = handles(outcome, opts.handle, opts.handle_result, opts.excluded_exceptions, opts.handle_kinds)
        if not failed and isinstance(outcome, Failure):
            # unhandled or excluded failures neither trip nor heal the circuit
            return None

        if is_trial:
            return self._open(outcome) if failed else self._close()
        if self._state is not CircuitBreakerState.CLOSED:
            return None

        if opts.failure_rate_threshold is not None:
            return self._record_sample(outcome, failed)
        if not failed:
            self._failure_count = 0
            return None
        self._failure_count += 1
        logger.warning(
            "circuit_breaker.failure",
            name=self.name,
            count=self._failure_count,
            threshold=opts.failure_threshold,
        )
        if self._failure_count >= opts.failure_threshold:
            return self._open(outcome)
        return None

    def _record_sample(self, outcome: Outcome[Any], failed: bool) -> _Transition | None:
        opts = self.options
        now = self._clock.monotonic()
        self._samples.append((now, failed))
        while self._samples and now - self._samples[0][0] > opts.sampling_duration:
            self._samples.popleft()
        self._failure_count = sum(1 for _, f in self._samples if f)
        throughput = len(self._samples)
        if (
            failed
            and throughput >= opts.minimum_throughput
            and self._failure_count / throughput >= opts.failure_rate_threshold  # type: ignore[operator]
        ):
            return self._open(outcome)
        return None

    def _move(self, target: CircuitBreakerState) -> None:
        if not self._state.can_transition_to(target):
            raise RuntimeError(f"Illegal circuit transition {self._state.value} -> {target.value}")
        self._state = target

    def _open(self, outcome: Outcome[Any]) -> _Transition:
        self._move(CircuitBreakerState.OPEN)
        self._opened_at = self._clock.monotonic()
        self._samples.clear()
        return _Transition(CircuitBreakerState.OPEN, outcome)

    def _close(self) -> _Transition:
        self._move(CircuitBreakerState.CLOSED)
        self._failure_count = 0
        self._opened_at = None
        self._samples.clear()
        return _Transition(CircuitBreakerState.CLOSED)

    # ------------------------------------------------------------------
    # Notifications (call without the lock)
    # ------------------------------------------------------------------

    def _notify(self, transition: _Transition | None) -> None:
        if transition is None:
            return
        opts = self.options
        if transition.state is CircuitBreakerState.OPEN:
            cause = transition.outcome.cause if isinstance(transition.outcome, Failure) else None
            logger.error(
                "circuit_breaker.opened",
                name=self.name,
                break_duration=opts.break_duration,
                error=repr(cause) if cause is not None else None,
            )
            fire_hook(opts.on_break, transition.outcome, opts.break_duration)
        elif transition.state is CircuitBreakerState.HALF_OPEN:
            logger.info("circuit_breaker.half_open", name=self.name)
            fire_hook(opts.on_half_open)
        else:
            logger.info("circuit_breaker.closed", name=self.name)
            fire_hook(opts.on_reset)

    def __repr__(self) -> str:
        return f"CircuitBreakerPolicy(name={self.name!r}, state={self._state.value})"


__all__ = ["CircuitBreakerPolicy"]
