"""Resilience – jitter strategies applied to a computed backoff delay.

Each strategy takes an optional :class:`random.Random` so tests can seed it.
"""
from __future__ import annotations

import abc
import random


class JitterStrategy(abc.ABC):
    @abc.abstractmethod
    def apply(self, delay: float) -> float:
        """Return the randomised delay; must stay ``>= 0`` for ``delay >= 0``."""


class NoJitter(JitterStrategy):
    def apply(self, delay: float) -> float:
        return delay


class _RandomJitter(JitterStrategy):
    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()


class FullJitter(_RandomJitter):
    """Anywhere in ``[0, delay]``."""

    def apply(self, delay: float) -> float:
        return self._rng.uniform(0.0, delay)


class EqualJitter(_RandomJitter):
    """Keeps half the delay, randomises the other half: ``[delay/2, delay]``."""

    def apply(self, delay: float) -> float:
        return delay / 2 + self._rng.uniform(0.0, delay / 2)


class ProportionalJitter(_RandomJitter):
    """Spread of ``±ratio`` around the delay, e.g. ``ratio=0.2`` gives ``[0.8d, 1.2d]``."""

    def __init__(self, ratio: float = 0.2, rng: random.Random | None = None) -> None:
        if not 0.0 <= ratio <= 1.0:
            raise ValueError("ratio must be within [0, 1]")
        super().__init__(rng)
        self._ratio = ratio

    def apply(self, delay: float) -> float:
        return delay * (1.0 + self._rng.uniform(-self._ratio, self._ratio))


__all__ = ["EqualJitter", "FullJitter", "JitterStrategy", "NoJitter", "ProportionalJitter"]
