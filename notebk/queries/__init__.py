"""Totals and summary queries."""

from notebk.queries.summary import (
    AnnualSummary,
    MonthSummary,
    MonthTotals,
    annual_summary,
    days_with_notes,
    expense_totals,
    savings_total,
    to_number,
)

__all__ = [
    "AnnualSummary",
    "MonthSummary",
    "MonthTotals",
    "annual_summary",
    "days_with_notes",
    "expense_totals",
    "savings_total",
    "to_number",
]
