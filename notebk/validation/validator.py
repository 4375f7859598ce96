"""
Backup Validation Pipeline

DESIGN DECISION: An imported backup replaces the whole document, so it
is checked in three stages before anything is handed back:

STAGE 1 - ENVELOPE:
- Is it a JSON object tagged with our app name?
- Is there a numeric version and an object payload?
- This alone rejects files that were not produced by this app

STAGE 2 - SCHEMA:
- Every mapping and every row has the right shape and types
- Catches hand-edited or truncated payloads before they can corrupt totals

STAGE 3 - SEMANTIC:
- Keys are canonical dates (YYYY-MM-DD / YYYY-MM / YYYY)
- Savings are keyed by Spanish month names
- Ids are unique within their list (warning only: the app never guards it)
- Amounts that are not numbers load as null (warning only: they count as 0)

Each stage only runs if the previous one passed. All issues of a stage
are reported, not just the first.
"""

from typing import Any, Iterable, Optional, TypeGuard

from pydantic import ValidationError

from notebk.models.backup import APP_NAME, ValidationIssue
from notebk.models.state import AppState, parse_amount
from notebk.state.keys import (
    DAY_KEY_PATTERN,
    MONTH_KEY_PATTERN,
    MONTH_NAMES,
    YEAR_KEY_PATTERN,
)


def validate_backup(candidate: Any) -> TypeGuard[dict]:
    """
    Shallow envelope check.

    True iff candidate is a JSON object whose appName is ours, whose
    version is a number and whose data is an object. The payload itself
    is not inspected here; see BackupValidator for that.
    """
    if not isinstance(candidate, dict):
        return False
    version = candidate.get("version")
    return (
        candidate.get("appName") == APP_NAME
        and isinstance(version, (int, float))
        and not isinstance(version, bool)
        and isinstance(candidate.get("data"), dict)
    )


def _error(field: str, issue_type: str, message: str) -> ValidationIssue:
    return ValidationIssue(field=field, issue_type=issue_type, message=message, severity="error")


def _warning(field: str, issue_type: str, message: str) -> ValidationIssue:
    return ValidationIssue(field=field, issue_type=issue_type, message=message, severity="warning")


class BackupValidator:
    """Validates a parsed backup file through the three-stage pipeline."""

    def _validate_envelope(self, candidate: Any) -> list[ValidationIssue]:
        """Stage 1: explain why validate_backup() failed."""
        if not isinstance(candidate, dict):
            return [_error("$", "not_an_object", "Backup must be a JSON object")]

        issues = []
        if candidate.get("appName") != APP_NAME:
            issues.append(_error(
                "appName",
                "wrong_app",
                f"Backup was not created by {APP_NAME}",
            ))
        version = candidate.get("version")
        if not isinstance(version, (int, float)) or isinstance(version, bool):
            issues.append(_error("version", "missing", "Backup version is missing or not a number"))
        if not isinstance(candidate.get("data"), dict):
            issues.append(_error("data", "missing", "Backup has no data object"))
        return issues

    def _validate_schema(self, data: dict) -> tuple[Optional[AppState], list[ValidationIssue]]:
        """Stage 2: shape of every mapping and row."""
        try:
            return AppState.model_validate(data), []
        except ValidationError as e:
            issues = [
                _error(
                    ".".join(["data", *(str(part) for part in error["loc"])]),
                    error["type"],
                    error["msg"],
                )
                for error in e.errors()
            ]
            return None, issues

    def _validate_semantic(self, state: AppState) -> list[ValidationIssue]:
        """Stage 3: canonical keys, month names, duplicate ids."""
        issues = []

        issues += self._check_keys("data.notes", state.notes, DAY_KEY_PATTERN, "YYYY-MM-DD")
        issues += self._check_keys("data.monthlyNotes", state.monthly_notes, MONTH_KEY_PATTERN, "YYYY-MM")
        issues += self._check_keys("data.expenses", state.expenses, MONTH_KEY_PATTERN, "YYYY-MM")
        issues += self._check_keys("data.savings", state.savings, YEAR_KEY_PATTERN, "YYYY")
        issues += self._check_keys("data.health", state.health, YEAR_KEY_PATTERN, "YYYY")
        issues += self._check_keys("data.customTables", state.custom_tables, YEAR_KEY_PATTERN, "YYYY")

        for year, months in state.savings.items():
            for name in months:
                if name not in MONTH_NAMES:
                    issues.append(_error(
                        f"data.savings.{year}.{name}",
                        "invalid_month",
                        f"Unknown month name '{name}'",
                    ))

        for month, rows in state.expenses.items():
            issues += self._check_unique_ids(f"data.expenses.{month}", rows)
        for year, items in state.health.items():
            issues += self._check_unique_ids(f"data.health.{year}", items)
        for year, tables in state.custom_tables.items():
            issues += self._check_unique_ids(f"data.customTables.{year}", tables)
            for index, table in enumerate(tables):
                issues += self._check_unique_ids(
                    f"data.customTables.{year}.{index}.rows", table.rows
                )

        return issues

    @staticmethod
    def _check_keys(field: str, mapping: dict, pattern, expected: str) -> list[ValidationIssue]:
        return [
            _error(f"{field}.{key}", "invalid_key", f"Key '{key}' is not a {expected} date")
            for key in mapping
            if not pattern.fullmatch(key)
        ]

    @staticmethod
    def _check_amounts(data: dict) -> list[ValidationIssue]:
        """Raw amounts that were read as null although a value was given."""
        issues = []

        def check(field: str, value: Any) -> None:
            if value is not None and parse_amount(value) is None:
                issues.append(_warning(
                    field,
                    "invalid_amount",
                    f"'{value}' is not a number, counted as 0",
                ))

        for month, rows in (data.get("expenses") or {}).items():
            for index, row in enumerate(rows or []):
                if isinstance(row, dict):
                    for name in ("income", "expense"):
                        check(f"data.expenses.{month}.{index}.{name}", row.get(name))
        for year, months in (data.get("savings") or {}).items():
            for name, amount in (months or {}).items():
                check(f"data.savings.{year}.{name}", amount)
        return issues

    @staticmethod
    def _check_unique_ids(field: str, items: Iterable) -> list[ValidationIssue]:
        seen = set()
        issues = []
        for item in items:
            if item.id in seen:
                issues.append(_warning(field, "duplicate_id", f"Id '{item.id}' appears more than once"))
            seen.add(item.id)
        return issues

    def validate(self, candidate: Any) -> tuple[Optional[AppState], list[ValidationIssue]]:
        """
        Run the full pipeline on a parsed JSON value.

        Returns:
            (document, issues). document is None when any error-level
            issue was found; warnings alone do not block the import.
        """
        if not validate_backup(candidate):
            return None, self._validate_envelope(candidate)

        state, issues = self._validate_schema(candidate["data"])
        if state is None:
            return None, issues

        issues = self._validate_semantic(state)
        issues += self._check_amounts(candidate["data"])
        if any(issue.severity == "error" for issue in issues):
            return None, issues
        return state, issues

    def get_user_friendly_summary(self, issues: list[ValidationIssue], limit: int = 5) -> str:
        """Short multi-line description of the issues, for the UI."""
        if not issues:
            return "✅ Backup válido."

        lines = []
        errors = [i for i in issues if i.severity == "error"]
        warnings = [i for i in issues if i.severity == "warning"]

        if errors:
            lines.append("❌ El backup tiene errores:")
            for issue in errors[:limit]:
                lines.append(f"   • {issue.field}: {issue.message}")
            if len(errors) > limit:
                lines.append(f"   … y {len(errors) - limit} más")

        if warnings:
            lines.append("⚠️ Avisos:")
            for issue in warnings[:limit]:
                lines.append(f"   • {issue.field}: {issue.message}")

        return "\n".join(lines)


def validate_backup_data(data: Any) -> list[ValidationIssue]:
    """Schema and semantic issues of a backup payload (the envelope's data)."""
    if not isinstance(data, dict):
        return [_error("data", "missing", "Backup has no data object")]

    validator = BackupValidator()
    state, issues = validator._validate_schema(data)
    if state is None:
        return issues
    return validator._validate_semantic(state) + validator._check_amounts(data)
