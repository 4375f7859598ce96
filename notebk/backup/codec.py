"""
Backup Codec

Wraps the document in the versioned envelope, turns it into text, and
turns untrusted text back into a validated document.

Nothing here touches storage: decoding only ever returns a result, and
the caller decides whether to apply it.
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Optional, Union

from notebk.models.backup import (
    APP_NAME,
    BACKUP_VERSION,
    BackupEnvelope,
    ImportResult,
)
from notebk.models.state import AppState
from notebk.validation import BackupValidator


INVALID_BACKUP_MESSAGE = "Archivo de backup inválido o corrupto"
JSON_ERROR_MESSAGE = "Error al leer el archivo JSON"
READ_ERROR_MESSAGE = "Error al leer el archivo"
SAVE_ERROR_MESSAGE = "Error al guardar los datos"

BackupSource = Union[str, bytes, os.PathLike, IO]


class BackupReadError(Exception):
    """The backup source could not be read as text."""
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def wrap_backup(state: AppState, now: Optional[datetime] = None) -> BackupEnvelope:
    return BackupEnvelope(
        version=BACKUP_VERSION,
        timestamp=iso_timestamp(now or _utcnow()),
        app_name=APP_NAME,
        data=state,
    )


def serialize_backup(envelope: BackupEnvelope, indent: int = 2) -> str:
    return json.dumps(envelope.to_document(), indent=indent, ensure_ascii=False)


def generate_backup_filename(now: Optional[datetime] = None) -> str:
    """notebk-backup-YYYY-MM-DD.json, dated in UTC."""
    moment = (now or _utcnow()).astimezone(timezone.utc)
    return f"{APP_NAME}-backup-{moment.strftime('%Y-%m-%d')}.json"


def read_source(source: BackupSource) -> str:
    """
    Full text of a backup source.

    str is taken as the JSON text itself; bytes are decoded as UTF-8;
    paths are read from disk; anything else must have a read() method
    (an open file, a Streamlit upload...).

    Raises:
        BackupReadError: If the source cannot be read or decoded
    """
    try:
        if isinstance(source, str):
            return source
        if isinstance(source, bytes):
            return source.decode("utf-8-sig")
        if isinstance(source, os.PathLike):
            return Path(source).read_text(encoding="utf-8-sig")
        content = source.read()
        if isinstance(content, bytes):
            return content.decode("utf-8-sig")
        return content
    except (OSError, UnicodeDecodeError) as e:
        raise BackupReadError(str(e)) from e


def source_label(source: BackupSource) -> str:
    """Short name of a source for logs."""
    if isinstance(source, (str, bytes)):
        return "<text>"
    if isinstance(source, os.PathLike):
        return Path(source).name
    return str(getattr(source, "name", "<stream>"))


def decode_backup(
    text: str,
    validator: Optional[BackupValidator] = None,
) -> ImportResult:
    """Parse and validate backup text. Never raises."""
    validator = validator or BackupValidator()

    try:
        candidate = json.loads(text)
    except (ValueError, RecursionError):
        return ImportResult(success=False, error=JSON_ERROR_MESSAGE)

    state, issues = validator.validate(candidate)
    if state is None:
        return ImportResult(success=False, error=INVALID_BACKUP_MESSAGE, issues=issues)
    return ImportResult(success=True, data=state, issues=issues)


def import_backup(
    source: BackupSource,
    validator: Optional[BackupValidator] = None,
) -> ImportResult:
    """Read, parse and validate a backup. Never raises, never saves."""
    try:
        text = read_source(source)
    except BackupReadError:
        return ImportResult(success=False, error=READ_ERROR_MESSAGE)
    return decode_backup(text, validator)
