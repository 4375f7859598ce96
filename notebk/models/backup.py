"""
Backup and Result Models for notebk

The live document carries no version of its own. Versioning exists only
in the backup envelope:

    {"version": 1, "timestamp": "<ISO-8601>", "appName": "notebk", "data": {...}}

Operations that cross the core boundary (save, import, export) return one
of the result models below instead of raising, so the UI can show a short
message for every outcome.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from notebk.models.state import AppState


APP_NAME = "notebk"
BACKUP_VERSION = 1


class BackupEnvelope(BaseModel):
    """Versioned wrapper written to backup files."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: int = Field(
        default=BACKUP_VERSION,
        description="Envelope format version"
    )
    timestamp: str = Field(
        ...,
        description="When the backup was created (ISO-8601, UTC)"
    )
    app_name: str = Field(
        default=APP_NAME,
        alias="appName",
        description="Fixed tag identifying backups made by this app"
    )
    data: AppState

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ExportChannel(str, Enum):
    """Which channel a backup actually left through."""
    SHARE = "share"
    CLIPBOARD = "clipboard"
    DOWNLOAD = "download"


class ValidationIssue(BaseModel):
    """A single problem found while validating an imported backup."""

    field: str = Field(
        ...,
        description="Dotted path of the offending value, e.g. data.expenses.2024-05.0.id"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'string_type', 'invalid_key')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class OperationResult(BaseModel):
    """
    Outcome of a state-changing operation.

    A successful result may still carry an advisory message.
    """
    success: bool
    error: Optional[str] = None
    message: Optional[str] = None


class ImportResult(OperationResult):
    """Outcome of reading and validating a backup file."""
    data: Optional[AppState] = None
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]


class ExportResult(OperationResult):
    """Outcome of handing a backup to a transfer channel."""
    channel: Optional[ExportChannel] = None
    filename: Optional[str] = None
