"""Resilience – Bulkhead pattern (concurrency + queue limiting)."""
from mp_resilience.resilience.bulkhead.errors import BulkheadRejectedError
from mp_resilience.resilience.bulkhead.limiters import QueueLimiter
from mp_resilience.resilience.bulkhead.bulkhead import BulkheadOptions, BulkheadPolicy

__all__ = ["BulkheadOptions", "BulkheadPolicy", "BulkheadRejectedError", "QueueLimiter"]
