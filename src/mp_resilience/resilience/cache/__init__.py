"""Resilience – cache-aside policy and cache providers."""
from mp_resilience.resilience.cache.policy import CacheOptions, CachePolicy
from mp_resilience.resilience.cache.provider import CacheEntry, CacheProvider, InMemoryCacheProvider

__all__ = ["CacheEntry", "CacheOptions", "CachePolicy", "CacheProvider", "InMemoryCacheProvider"]
