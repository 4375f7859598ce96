"""
Audit Models for notebk

Every operation that touches the persisted document or moves a backup
across the process boundary is recorded as an AuditEvent. Events go to
the local structured log; they are never written into the document.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Persistent store
    STATE_LOADED = "state_loaded"
    STATE_DEFAULTED = "state_defaulted"
    STATE_CORRUPT = "state_corrupt"
    STATE_REPAIRED = "state_repaired"
    STATE_PRESERVED = "state_preserved"
    STATE_READ_FAILED = "state_read_failed"
    STATE_SAVED = "state_saved"
    SAVE_FAILED = "save_failed"

    # Backup
    BACKUP_EXPORTED = "backup_exported"
    BACKUP_EXPORT_FALLBACK = "backup_export_fallback"
    BACKUP_EXPORT_FAILED = "backup_export_failed"
    BACKUP_IMPORTED = "backup_imported"
    BACKUP_REJECTED = "backup_rejected"
    BACKUP_APPLIED = "backup_applied"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What the event is about: a storage key, a backup filename...
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.state_saved("notebk_data", size=1024)
        event = AuditEventBuilder.backup_rejected("backup.json", "invalid envelope")
    """

    @staticmethod
    def state_loaded(key: str, size: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type="document",
            entity_id=key,
            description=f"Document loaded from '{key}'",
            details={"size_chars": size},
        )

    @staticmethod
    def state_defaulted(key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_DEFAULTED,
            entity_type="document",
            entity_id=key,
            description=f"No document stored at '{key}', starting empty",
        )

    @staticmethod
    def state_corrupt(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_CORRUPT,
            severity=AuditSeverity.ERROR,
            entity_type="document",
            entity_id=key,
            description=f"Stored document at '{key}' is unreadable, using defaults",
            error_message=error_message,
        )

    @staticmethod
    def state_repaired(key: str, dropped: list[str], error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_REPAIRED,
            severity=AuditSeverity.ERROR,
            entity_type="document",
            entity_id=key,
            description=f"Stored document at '{key}' had invalid entries, dropped {len(dropped)}",
            details={"dropped": dropped},
            error_message=error_message,
        )

    @staticmethod
    def state_preserved(key: str, preserved_key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_PRESERVED,
            severity=AuditSeverity.WARNING,
            entity_type="document",
            entity_id=key,
            description=f"Unreadable document copied to '{preserved_key}'",
            details={"preserved_key": preserved_key},
        )

    @staticmethod
    def state_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_READ_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="document",
            entity_id=key,
            description=f"Could not read document at '{key}', using defaults",
            error_message=error_message,
        )

    @staticmethod
    def state_saved(key: str, size: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="document",
            entity_id=key,
            description=f"Document saved to '{key}'",
            details={"size_chars": size},
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="document",
            entity_id=key,
            description=f"Could not save document to '{key}'",
            error_message=error_message,
        )

    @staticmethod
    def backup_exported(filename: str, channel: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_EXPORTED,
            entity_type="backup",
            entity_id=filename,
            description=f"Backup exported via {channel}",
            details={"channel": channel},
        )

    @staticmethod
    def backup_export_fallback(filename: str, channel: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_EXPORT_FALLBACK,
            severity=AuditSeverity.WARNING,
            entity_type="backup",
            entity_id=filename,
            description=f"Backup exported via fallback channel {channel}",
            details={"channel": channel, "reason": reason},
        )

    @staticmethod
    def backup_export_failed(filename: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="backup",
            entity_id=filename,
            description="Backup export failed",
            error_message=error_message,
        )

    @staticmethod
    def backup_imported(source: str, warnings: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_IMPORTED,
            entity_type="backup",
            entity_id=source,
            description="Backup read and validated",
            details={"warnings": warnings},
        )

    @staticmethod
    def backup_rejected(source: str, reason: str, issues: Optional[list[dict]] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="backup",
            entity_id=source,
            description=f"Backup rejected: {reason}",
            details={"issues": issues or []},
        )

    @staticmethod
    def backup_applied(key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_APPLIED,
            severity=AuditSeverity.WARNING,
            entity_type="document",
            entity_id=key,
            description=f"Document at '{key}' replaced by an imported backup",
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
