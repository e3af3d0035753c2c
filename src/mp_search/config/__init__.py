"""Config – settings loading; the errors live in ``mp_search.kernel.errors``."""
from mp_search.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from mp_search.kernel.errors import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
