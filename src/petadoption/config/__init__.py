"""Configuration – 12-factor settings."""
from petadoption.config.service import ServiceSettings
from petadoption.config.settings import DotenvSettingsLoader, EnvSettingsLoader, Settings, SettingsLoader
from petadoption.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "ServiceSettings",
    "Settings",
    "SettingsLoader",
]
