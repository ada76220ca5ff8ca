"""Resilience – timeout policies."""
from mp_resilience.resilience.timeouts.errors import TimeoutRejectedError
from mp_resilience.resilience.timeouts.policy import TimeoutMode, TimeoutOptions, TimeoutPolicy

__all__ = ["TimeoutMode", "TimeoutOptions", "TimeoutPolicy", "TimeoutRejectedError"]
