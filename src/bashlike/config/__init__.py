"""
Configuration module for bashlike.

Layered configuration loading (CLI > env > user > project > defaults)
validated with pydantic.
"""

from bashlike.config.defaults import (
    DEFAULT_CONFIG,
    DEFAULT_CONFIG_RELATIVE_PATH,
    ENV_PREFIX,
    PROJECT_CONFIG_FILENAME,
    USER_CONFIG_PATH,
)
from bashlike.config.settings import (
    ConfigService,
    ExecutionSettings,
    FilesSettings,
    GeneralSettings,
    Settings,
    config_service,
    get_settings,
    reload_settings,
    set_settings,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_RELATIVE_PATH",
    "ENV_PREFIX",
    "PROJECT_CONFIG_FILENAME",
    "USER_CONFIG_PATH",
    "ConfigService",
    "ExecutionSettings",
    "FilesSettings",
    "GeneralSettings",
    "Settings",
    "config_service",
    "get_settings",
    "reload_settings",
    "set_settings",
]
