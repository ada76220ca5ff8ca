"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    └── ApplicationError        (application.py)
        ├── ConfigError         (mp_resilience.config.validation)
        └── ResilienceError     (mp_resilience.resilience.errors)
"""

from mp_resilience.kernel.errors.application import ApplicationError
from mp_resilience.kernel.errors.base import BaseError

__all__ = [
    "ApplicationError",
    "BaseError",
]
