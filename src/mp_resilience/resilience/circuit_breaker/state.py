"""Resilience – CircuitBreakerState and its legal transitions."""
from __future__ import annotations

from enum import Enum


class CircuitBreakerState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"

    def can_transition_to(self, target: "CircuitBreakerState") -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[CircuitBreakerState, frozenset[CircuitBreakerState]] = {
    CircuitBreakerState.CLOSED: frozenset({CircuitBreakerState.OPEN}),
    CircuitBreakerState.OPEN: frozenset({CircuitBreakerState.HALF_OPEN}),
    CircuitBreakerState.HALF_OPEN: frozenset({CircuitBreakerState.CLOSED, CircuitBreakerState.OPEN}),
}


__all__ = ["CircuitBreakerState"]
