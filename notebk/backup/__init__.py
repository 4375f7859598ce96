"""Backup package: envelope codec and backup service."""

from notebk.backup.codec import (
    INVALID_BACKUP_MESSAGE,
    JSON_ERROR_MESSAGE,
    READ_ERROR_MESSAGE,
    SAVE_ERROR_MESSAGE,
    BackupReadError,
    decode_backup,
    generate_backup_filename,
    import_backup,
    read_source,
    serialize_backup,
    wrap_backup,
)
from notebk.backup.service import BackupService
from notebk.validation import validate_backup

__all__ = [
    "INVALID_BACKUP_MESSAGE",
    "JSON_ERROR_MESSAGE",
    "READ_ERROR_MESSAGE",
    "SAVE_ERROR_MESSAGE",
    "BackupReadError",
    "BackupService",
    "decode_backup",
    "generate_backup_filename",
    "import_backup",
    "read_source",
    "serialize_backup",
    "validate_backup",
    "wrap_backup",
]
