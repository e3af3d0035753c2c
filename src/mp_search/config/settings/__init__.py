"""Config settings – 12-factor env-based configuration."""
from mp_search.config.settings.base import Settings
from mp_search.config.settings.factory import SettingsFactory
from mp_search.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsFactory", "SettingsLoader"]
