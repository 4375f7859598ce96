"""
Tests for notebk models

Test strategy:
1. Unit tests for individual components (models, mutators, codec)
2. Integration tests for flows (notebook, backup service) over in-memory storage
3. No real share sheet, clipboard or browser in tests (use fakes)
"""

import json

import pytest

from notebk.models import (
    APP_NAME,
    BACKUP_VERSION,
    AppState,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    BackupEnvelope,
    CustomTable,
    Expense,
    ImportResult,
    ValidationIssue,
)


class TestAppState:
    """Tests for the document model."""

    def test_default_has_all_six_mappings_empty(self):
        """Test a fresh document has every mapping present and empty."""
        doc = AppState().to_document()
        assert doc == {
            "expenses": {},
            "savings": {},
            "notes": {},
            "monthlyNotes": {},
            "health": {},
            "customTables": {},
        }

    def test_missing_mappings_default_to_empty(self):
        """Test documents written before monthlyNotes existed still load."""
        state = AppState.model_validate({
            "expenses": {}, "savings": {}, "notes": {"2024-05-01": "hola"},
            "health": {}, "customTables": {},
        })
        assert state.monthly_notes == {}
        assert state.notes["2024-05-01"] == "hola"

    def test_null_mappings_are_empty(self):
        """Test a null mapping is the same as an absent one."""
        state = AppState.model_validate({"notes": None, "savings": None})
        assert state.notes == {}
        assert state.savings == {}

    def test_camel_case_round_trip(self):
        """Test stored field names stay camelCase."""
        state = AppState.model_validate({
            "monthlyNotes": {"2024-05": "mayo"},
            "customTables": {"2024": [{"id": "t1", "title": "Libros", "col1Title": "Autor"}]},
        })
        doc = state.to_document()
        assert doc["monthlyNotes"] == {"2024-05": "mayo"}
        assert doc["customTables"]["2024"][0]["col1Title"] == "Autor"
        assert doc["customTables"]["2024"][0]["col2Title"] == "Columna 2"

    def test_to_json_is_stable(self):
        """Test the same document always serializes to the same text."""
        state = AppState.model_validate({"notes": {"2024-05-01": "a", "2024-05-02": "b"}})
        assert state.to_json() == state.to_json()
        assert json.loads(state.to_json())["notes"] == {"2024-05-01": "a", "2024-05-02": "b"}

    def test_models_are_frozen(self):
        """Test documents cannot be patched in place."""
        state = AppState()
        with pytest.raises(ValueError):
            state.notes = {"2024-05-01": "x"}


class TestRowModels:
    """Tests for expense, health and table rows."""

    def test_expense_defaults(self):
        """Test an expense only needs an id."""
        expense = Expense(id="1")
        assert expense.income == 0.0
        assert expense.expense == 0.0
        assert expense.concept == ""

    def test_expense_accepts_null_amount(self):
        """Test a cleared amount is stored as null."""
        expense = Expense.model_validate({"id": "1", "income": None})
        assert expense.income is None

    def test_expense_non_numeric_amount_is_null(self):
        """Test garbage amounts load as null instead of failing the row."""
        expense = Expense.model_validate({"id": "1", "income": "abc", "expense": "12,5"})
        assert expense.income is None
        assert expense.expense == 12.5

    def test_savings_cells_are_lenient(self):
        """Test savings cells that are not numbers load as null."""
        state = AppState.model_validate({"savings": {"2024": {"Enero": "abc", "Febrero": "800"}}})
        assert state.savings["2024"] == {"Enero": None, "Febrero": 800.0}

    def test_custom_table_defaults(self):
        """Test table defaults for columns, color and icon."""
        table = CustomTable(id="t1", title="Pelis")
        assert table.col1_title == "Columna 1"
        assert table.col2_title == "Columna 2"
        assert table.color == "#000000"
        assert table.icon == "list"
        assert table.rows == []


class TestBackupModels:
    """Tests for the envelope and result models."""

    def test_envelope_document(self):
        """Test the envelope serializes with appName."""
        envelope = BackupEnvelope(timestamp="2024-05-17T10:30:00.000Z", data=AppState())
        doc = envelope.to_document()
        assert doc["appName"] == APP_NAME
        assert doc["version"] == BACKUP_VERSION
        assert doc["data"]["expenses"] == {}

    def test_validation_issue_severity(self):
        """Test severity is restricted."""
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="t", message="m", severity="fatal")

    def test_import_result_warnings(self):
        """Test warnings are collected from issues."""
        result = ImportResult(
            success=True,
            issues=[
                ValidationIssue(field="a", issue_type="duplicate_id", message="dup", severity="warning"),
            ],
        )
        assert result.has_errors is False
        assert result.warnings == ["dup"]


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            description="saved",
        )
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.state_corrupt("notebk_data", "bad json")
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "state_corrupt"
        assert log_dict["severity"] == "error"
        assert log_dict["entity_id"] == "notebk_data"
        assert log_dict["error_message"] == "bad json"

    def test_backup_rejected_builder(self):
        """Test rejected backups carry their issues."""
        event = AuditEventBuilder.backup_rejected("b.json", "invalid", [{"field": "data"}])
        assert event.event_type == AuditEventType.BACKUP_REJECTED
        assert event.details["issues"] == [{"field": "data"}]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
