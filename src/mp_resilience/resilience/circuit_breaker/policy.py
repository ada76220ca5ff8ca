"""Resilience – CircuitBreakerOptions."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, ClassVar

from mp_resilience.config.settings import Settings
from mp_resilience.resilience.errors import ErrorKind
from mp_resilience.resilience.outcome import Outcome
from mp_resilience.resilience.policy import ResultPredicate


@dataclasses.dataclass
class CircuitBreakerOptions(Settings):
    """Configuration for a circuit breaker.

    By default the circuit opens after ``failure_threshold`` consecutive
    handled failures. Setting ``failure_rate_threshold`` switches to the
    sampling mode: the circuit opens once at least ``minimum_throughput``
    calls were seen within the last ``sampling_duration`` seconds and the
    share of failures among them reaches the threshold.
    """

    _prefix: ClassVar[str] = "RESILIENCE_CIRCUIT_BREAKER"

    failure_threshold: int = 5
    break_duration: float = 30.0
    failure_rate_threshold: float | None = None
    sampling_duration: float = 60.0
    minimum_throughput: int = 10
    handle: tuple[type[BaseException], ...] = (Exception,)
    handle_kinds: frozenset[ErrorKind] = frozenset()
    excluded_exceptions: tuple[type[BaseException], ...] = ()
    handle_result: ResultPredicate | None = None
    on_break: Callable[[Outcome[Any], float], Any] | None = None
    on_reset: Callable[[], Any] | None = None
    on_half_open: Callable[[], Any] | None = None

    def _validate(self) -> None:
        self._require("failure_threshold", self.failure_threshold >= 1, "must be >= 1")
        self._require("break_duration", self.break_duration >= 0, "must be >= 0")
        self._require(
            "failure_rate_threshold",
            self.failure_rate_threshold is None or 0 < self.failure_rate_threshold <= 1,
            "must be within (0, 1]",
        )
        self._require("sampling_duration", self.sampling_duration > 0, "must be > 0")
        self._require("minimum_throughput", self.minimum_throughput >= 1, "must be >= 1")


__all__ = ["CircuitBreakerOptions"]
