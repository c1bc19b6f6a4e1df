"""Configuration management using pydantic-settings."""

from .settings import (
    DEFAULT_API_BASE_URL,
    IcePanelSettings,
    LoggingSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "DEFAULT_API_BASE_URL",
    "IcePanelSettings",
    "LoggingSettings",
    "clear_settings_cache",
    "get_settings",
]
