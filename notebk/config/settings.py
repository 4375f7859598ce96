"""
Configuration Management for notebk

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable (where the document lives, where exports land, how the
host platform is detected) is visible in one place and validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local document storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="NOTEBK_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path.home() / ".notebk",
        description="Directory holding the persisted document"
    )
    key: str = Field(
        default="notebk_data",
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Storage slot name for the application document"
    )
    preserve_corrupt: bool = Field(
        default=False,
        description="Copy an unreadable document aside before falling back to defaults"
    )

    @field_validator('data_dir')
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        """Allow '~' in paths coming from the environment."""
        return v.expanduser()


class BackupSettings(BaseSettings):
    """Backup export configuration."""

    model_config = SettingsConfigDict(
        env_prefix="NOTEBK_BACKUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    export_dir: Path = Field(
        default=Path.home() / "Downloads",
        description="Where downloaded backups are written on web/desktop hosts"
    )
    indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="JSON indentation used in backup files"
    )

    @field_validator('export_dir')
    @classmethod
    def expand_export_dir(cls, v: Path) -> Path:
        return v.expanduser()


class TransferSettings(BaseSettings):
    """How backups leave the process (share sheet, clipboard, download)."""

    model_config = SettingsConfigDict(
        env_prefix="NOTEBK_TRANSFER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    platform: str = Field(
        default="auto",
        pattern="^(auto|native|web)$",
        description="Force a host platform or detect it automatically"
    )
    share_command: str = Field(
        default="termux-share",
        description="Command that opens the native share sheet"
    )
    clipboard_command: str = Field(
        default="termux-clipboard-set",
        description="Command that writes stdin to the native clipboard"
    )
    command_timeout: float = Field(
        default=120.0,
        gt=0,
        description="Seconds to wait for the share sheet or clipboard command"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for local structured logs"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def backup(self) -> BackupSettings:
        return BackupSettings()

    @property
    def transfer(self) -> TransferSettings:
        return TransferSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "backup", "transfer", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
