"""Resilience – Fallback policy."""
from mp_resilience.resilience.fallback.policy import FallbackOptions, FallbackPolicy

__all__ = ["FallbackOptions", "FallbackPolicy"]
