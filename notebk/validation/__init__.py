"""Backup validation package."""

from notebk.validation.validator import (
    BackupValidator,
    validate_backup,
    validate_backup_data,
)

__all__ = ["BackupValidator", "validate_backup", "validate_backup_data"]
