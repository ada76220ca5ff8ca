"""Resilience – token-bucket rate limiting."""
from mp_resilience.resilience.rate_limit.errors import RateLimitRejectedError
from mp_resilience.resilience.rate_limit.policy import RateLimiterOptions, RateLimiterPolicy
from mp_resilience.resilience.rate_limit.token_bucket import TokenBucket

__all__ = ["RateLimitRejectedError", "RateLimiterOptions", "RateLimiterPolicy", "TokenBucket"]
