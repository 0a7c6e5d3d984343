"""Config settings – 12-factor env-based configuration."""
from petadoption.config.settings.base import Settings
from petadoption.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsLoader"]
