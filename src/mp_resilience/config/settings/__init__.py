"""Config settings – 12-factor env-based configuration."""
from mp_resilience.config.settings.base import Settings
from mp_resilience.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["EnvSettingsLoader", "Settings", "SettingsLoader"]
