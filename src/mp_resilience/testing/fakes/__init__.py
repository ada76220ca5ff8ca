"""Testing fakes – deterministic doubles for clocks and operations."""
from mp_resilience.testing.fakes.clock import FakeClock
from mp_resilience.testing.fakes.operation import ScriptedOperation
from mp_resilience.kernel.time import FrozenClock

__all__ = ["FakeClock", "FrozenClock", "ScriptedOperation"]
