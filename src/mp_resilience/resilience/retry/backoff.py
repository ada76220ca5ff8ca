"""Resilience – backoff strategies.

``compute(attempt)`` receives the 1-based index of the attempt that just
failed and returns the number of seconds to wait before the next one.
"""
from __future__ import annotations

import abc
from typing import Callable


class BackoffStrategy(abc.ABC):
    """Compute wait duration (seconds) after the *attempt*-th failure."""

    @abc.abstractmethod
    def compute(self, attempt: int) -> float: ...


class ConstantBackoff(BackoffStrategy):
    """Fixed delay between attempts."""

    def __init__(self, delay: float = 1.0) -> None:
        self._delay = delay

    def compute(self, attempt: int) -> float:  # noqa: ARG002
        return self._delay


class LinearBackoff(BackoffStrategy):
    """Delay grows linearly: ``base_delay * attempt``."""

    def __init__(self, base_delay: float = 0.5, max_delay: float = 30.0) -> None:
        self._base = base_delay
        self._max = max_delay

    def compute(self, attempt: int) -> float:
        return min(self._base * attempt, self._max)


class ExponentialBackoff(BackoffStrategy):
    """Delay grows exponentially: ``base_delay * 2^attempt``."""

    def __init__(self, base_delay: float = 0.1, max_delay: float = 30.0) -> None:
        self._base = base_delay
        self._max = max_delay

    def compute(self, attempt: int) -> float:
        return min(self._base * (2 ** attempt), self._max)


class ScheduleBackoff(BackoffStrategy):
    """Explicit delay list; the last entry repeats once the list runs out."""

    def __init__(self, delays: tuple[float, ...]) -> None:
        if not delays:
            raise ValueError("ScheduleBackoff requires at least one delay")
        self._delays = tuple(delays)

    def compute(self, attempt: int) -> float:
        return self._delays[max(0, min(attempt, len(self._delays)) - 1)]


class FunctionBackoff(BackoffStrategy):
    """Adapter for a plain ``f(attempt) -> seconds`` callable."""

    def __init__(self, fn: Callable[[int], float]) -> None:
        self._fn = fn

    def compute(self, attempt: int) -> float:
        return float(self._fn(attempt))


__all__ = [
    "BackoffStrategy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "FunctionBackoff",
    "LinearBackoff",
    "ScheduleBackoff",
]
