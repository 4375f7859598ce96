"""
Backup Service

Ties the codec to the persistent store, the transfer channels and the
audit log:

    export:  store.load() -> envelope -> JSON text -> exporter
    import:  file -> JSON -> three-stage validation -> ImportResult
    apply:   validated document -> store.save()

Import and apply are separate on purpose: the UI shows what was read and
only calls apply_backup() once the user confirms. An import never
merges; applying replaces the whole document.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from notebk.audit import AuditLogger
from notebk.backup.codec import (
    SAVE_ERROR_MESSAGE,
    BackupSource,
    generate_backup_filename,
    import_backup,
    serialize_backup,
    source_label,
    wrap_backup,
)
from notebk.config import BackupSettings, TransferSettings, get_settings
from notebk.models.audit import AuditEventBuilder
from notebk.models.backup import (
    BackupEnvelope,
    ExportChannel,
    ExportResult,
    ImportResult,
    OperationResult,
)
from notebk.models.state import AppState
from notebk.services.storage import StateStore, StorageError
from notebk.services.transfer import (
    EXPORT_ERROR_MESSAGE,
    Exporter,
    build_exporter,
    detect_platform,
)
from notebk.validation import BackupValidator


class BackupService:
    """Creates, exports, imports and applies backups of one StateStore."""

    def __init__(
        self,
        store: StateStore,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[BackupValidator] = None,
        backup_settings: Optional[BackupSettings] = None,
        transfer_settings: Optional[TransferSettings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self._audit = audit_logger or AuditLogger()
        self._validator = validator or BackupValidator()
        self._backup_settings = backup_settings or get_settings().backup
        self._transfer_settings = transfer_settings or get_settings().transfer
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def validator(self) -> BackupValidator:
        return self._validator

    def create_backup(self) -> BackupEnvelope:
        """Envelope around the currently stored document."""
        return wrap_backup(self._store.load(), now=self._clock())

    def serialize(self, envelope: BackupEnvelope) -> str:
        return serialize_backup(envelope, indent=self._backup_settings.indent)

    def generate_backup_filename(self) -> str:
        return generate_backup_filename(now=self._clock())

    def export_backup(self, exporter: Optional[Exporter] = None) -> ExportResult:
        """
        Export the stored document through one transfer channel.

        Args:
            exporter: Channel to use. When None, the host platform is
                      detected and its default exporter is built.
        """
        filename = self.generate_backup_filename()
        try:
            text = self.serialize(self.create_backup())
            if exporter is None:
                platform = detect_platform(self._transfer_settings.platform)
                exporter = build_exporter(
                    platform,
                    self._transfer_settings,
                    export_dir=self._backup_settings.export_dir,
                )
            result = exporter.export(text, filename)
        except Exception as e:
            self._audit.log(AuditEventBuilder.backup_export_failed(filename, str(e)))
            return ExportResult(success=False, error=EXPORT_ERROR_MESSAGE, filename=filename)

        if not result.success:
            self._audit.log(AuditEventBuilder.backup_export_failed(filename, result.error or ""))
        elif result.channel == ExportChannel.CLIPBOARD:
            self._audit.log(AuditEventBuilder.backup_export_fallback(
                filename, result.channel.value, "share unavailable",
            ))
        else:
            channel = result.channel.value if result.channel else "unknown"
            self._audit.log(AuditEventBuilder.backup_exported(filename, channel))
        return result

    def import_backup(self, source: BackupSource) -> ImportResult:
        """Read and validate a backup. Does not change stored state."""
        result = import_backup(source, self._validator)
        label = source_label(source)

        if result.success:
            self._audit.log(AuditEventBuilder.backup_imported(label, len(result.warnings)))
        else:
            self._audit.log(AuditEventBuilder.backup_rejected(
                label,
                result.error or "",
                [issue.model_dump() for issue in result.issues],
            ))
        return result

    def apply_backup(self, data: AppState) -> OperationResult:
        """Replace the stored document with an imported one."""
        try:
            self._store.save(data)
        except StorageError:
            return OperationResult(success=False, error=SAVE_ERROR_MESSAGE)
        self._audit.log(AuditEventBuilder.backup_applied(self._store.key))
        return OperationResult(success=True)
