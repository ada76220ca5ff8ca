"""Resilience – Circuit Breaker pattern."""
from mp_resilience.resilience.circuit_breaker.errors import CircuitOpenError
from mp_resilience.resilience.circuit_breaker.state import CircuitBreakerState
from mp_resilience.resilience.circuit_breaker.policy import CircuitBreakerOptions
from mp_resilience.resilience.circuit_breaker.breaker import CircuitBreakerPolicy

__all__ = ["CircuitBreakerOptions", "CircuitBreakerPolicy", "CircuitBreakerState", "CircuitOpenError"]
