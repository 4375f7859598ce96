"""
Data Models Package

This package contains all Pydantic models used by notebk: the persisted
document, the backup envelope, operation results and audit events.
"""

from notebk.models.state import (
    DEFAULT_COLUMN_1_TITLE,
    DEFAULT_COLUMN_2_TITLE,
    DEFAULT_TABLE_COLOR,
    DEFAULT_TABLE_ICON,
    AppState,
    CustomTable,
    Expense,
    HealthItem,
    TableRow,
    parse_amount,
)
from notebk.models.backup import (
    APP_NAME,
    BACKUP_VERSION,
    BackupEnvelope,
    ExportChannel,
    ExportResult,
    ImportResult,
    OperationResult,
    ValidationIssue,
)
from notebk.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Document models
    "DEFAULT_COLUMN_1_TITLE",
    "DEFAULT_COLUMN_2_TITLE",
    "DEFAULT_TABLE_COLOR",
    "DEFAULT_TABLE_ICON",
    "AppState",
    "CustomTable",
    "Expense",
    "HealthItem",
    "TableRow",
    "parse_amount",
    # Backup and results
    "APP_NAME",
    "BACKUP_VERSION",
    "BackupEnvelope",
    "ExportChannel",
    "ExportResult",
    "ImportResult",
    "OperationResult",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
