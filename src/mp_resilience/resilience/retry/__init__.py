"""Resilience – retry with configurable backoff and jitter strategies."""
from mp_resilience.resilience.retry.backoff import (
    BackoffStrategy,
    ConstantBackoff,
    ExponentialBackoff,
    FunctionBackoff,
    LinearBackoff,
    ScheduleBackoff,
)
from mp_resilience.resilience.retry.errors import RetryExhaustedError
from mp_resilience.resilience.retry.jitter import (
    EqualJitter,
    FullJitter,
    JitterStrategy,
    NoJitter,
    ProportionalJitter,
)
from mp_resilience.resilience.retry.policy import RetryOptions, RetryPolicy
from mp_resilience.resilience.retry.tenacity_adapter import TenacityRetryPolicy

__all__ = [
    "BackoffStrategy", "ConstantBackoff", "EqualJitter", "ExponentialBackoff",
    "FullJitter", "FunctionBackoff", "JitterStrategy", "LinearBackoff", "NoJitter",
    "ProportionalJitter", "RetryExhaustedError", "RetryOptions", "RetryPolicy", "ScheduleBackoff",
    "TenacityRetryPolicy",
]
