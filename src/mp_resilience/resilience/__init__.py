"""Resilience – retry, circuit breaker, timeout, bulkhead, rate limiter, cache, fallback and pipelines."""

from mp_resilience.resilience.errors import (
    CancellationRequestedError,
    ErrorKind,
    OperationFailedError,
    ResilienceError,
)
from mp_resilience.resilience.outcome import Failure, Outcome, Success
from mp_resilience.resilience.context import CancellationToken, ExecutionContext
from mp_resilience.resilience.policy import NoOpPolicy, Policy
from mp_resilience.resilience.retry import (
    BackoffStrategy,
    ExponentialBackoff,
    JitterStrategy,
    RetryExhaustedError,
    RetryOptions,
    RetryPolicy,
    TenacityRetryPolicy,
)
from mp_resilience.resilience.circuit_breaker import (
    CircuitBreakerOptions,
    CircuitBreakerPolicy,
    CircuitBreakerState,
    CircuitOpenError,
)
from mp_resilience.resilience.timeouts import TimeoutMode, TimeoutOptions, TimeoutPolicy, TimeoutRejectedError
from mp_resilience.resilience.bulkhead import BulkheadOptions, BulkheadPolicy, BulkheadRejectedError, QueueLimiter
from mp_resilience.resilience.rate_limit import (
    RateLimiterOptions,
    RateLimiterPolicy,
    RateLimitRejectedError,
    TokenBucket,
)
from mp_resilience.resilience.cache import CacheOptions, CachePolicy, CacheProvider, InMemoryCacheProvider
from mp_resilience.resilience.fallback import FallbackOptions, FallbackPolicy
from mp_resilience.resilience.pipeline import PolicyPipeline, wrap

__all__ = [
    "BackoffStrategy",
    "BulkheadOptions",
    "BulkheadPolicy",
    "BulkheadRejectedError",
    "CacheOptions",
    "CachePolicy",
    "CacheProvider",
    "CancellationRequestedError",
    "CancellationToken",
    "CircuitBreakerOptions",
    "CircuitBreakerPolicy",
    "CircuitBreakerState",
    "CircuitOpenError",
    "ErrorKind",
    "ExecutionContext",
    "ExponentialBackoff",
    "Failure",
    "FallbackOptions",
    "FallbackPolicy",
    "InMemoryCacheProvider",
    "JitterStrategy",
    "NoOpPolicy",
    "OperationFailedError",
    "Outcome",
    "Policy",
    "PolicyPipeline",
    "QueueLimiter",
    "RateLimitRejectedError",
    "RateLimiterOptions",
    "RateLimiterPolicy",
    "ResilienceError",
    "RetryExhaustedError",
    "RetryOptions",
    "RetryPolicy",
    "Success",
    "TenacityRetryPolicy",
    "TimeoutMode",
    "TimeoutOptions",
    "TimeoutPolicy",
    "TimeoutRejectedError",
    "TokenBucket",
    "wrap",
]
