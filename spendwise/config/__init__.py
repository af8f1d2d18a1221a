"""Configuration package."""

from spendwise.config.settings import (
    LedgerSettings,
    LoggingSettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "LedgerSettings",
    "LoggingSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]
