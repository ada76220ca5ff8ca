"""Testing support – fakes for policy tests.

::

    from mp_resilience.testing import FakeClock, ScriptedOperation
"""

from mp_resilience.testing.fakes import FakeClock, ScriptedOperation

__all__ = ["FakeClock", "ScriptedOperation"]
