"""Configuration package."""

from mywallet.config.settings import (
    AppSettings,
    AssistantSettings,
    AuthSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AssistantSettings",
    "AuthSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
