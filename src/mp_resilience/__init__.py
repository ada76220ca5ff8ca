"""
mp_resilience – Resilience policy execution engine.

Import path convention::

    from mp_resilience.resilience import RetryPolicy, RetryOptions, wrap
    from mp_resilience.resilience.context import ExecutionContext
    from mp_resilience.kernel.errors import ApplicationError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
