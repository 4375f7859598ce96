"""Configuration package."""

from notebk.config.settings import (
    AppSettings,
    BackupSettings,
    Settings,
    StorageSettings,
    TransferSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "BackupSettings",
    "Settings",
    "StorageSettings",
    "TransferSettings",
    "get_settings",
    "validate_all_settings",
]
