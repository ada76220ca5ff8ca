"""Kernel time – Clock protocol + implementations.

Policies measure elapsed time (break durations, cache expiry, token
refill) through :meth:`Clock.monotonic` so tests can drive time with a
:class:`FrozenClock` instead of sleeping.
"""
from __future__ import annotations

import time
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: abstract clock for deterministic testing."""

    def now(self) -> datetime: ...
    def monotonic(self) -> float: ...


class SystemClock:
    """Production clock: wall time from ``datetime.now(UTC)``, elapsed time from ``time.monotonic``."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def monotonic(self) -> float:
        return time.monotonic()


class FrozenClock:
    """Test clock pinned to a fixed point in time until :meth:`advance` is called."""

    def __init__(self, fixed: datetime) -> None:
        self._fixed = fixed
        self._elapsed = 0.0

    def now(self) -> datetime:
        return self._fixed

    def monotonic(self) -> float:
        return self._elapsed

    def advance(self, **kwargs: int | float) -> None:
        """Advance the frozen time by the given ``timedelta`` kwargs."""
        delta = timedelta(**kwargs)
        if delta < timedelta(0):
            raise ValueError("FrozenClock cannot move backwards")
        self._fixed += delta
        self._elapsed += delta.total_seconds()


def utc_now() -> datetime:
    """Shorthand for ``datetime.now(UTC)``."""
    return datetime.now(UTC)


__all__ = ["Clock", "FrozenClock", "SystemClock", "utc_now"]
