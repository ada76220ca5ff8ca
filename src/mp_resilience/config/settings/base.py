"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from mp_resilience.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class Settings:
    """Base class for policy options.

    Subclasses are plain dataclasses; ``_prefix`` names the environment
    variable namespace used by :class:`EnvSettingsLoader`.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    def _require(self, name: str, condition: bool, reason: str) -> None:
        if not condition:
            raise InvalidSettingValueError(name, getattr(self, name), reason)


__all__ = ["Settings"]
