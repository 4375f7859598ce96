"""
Totals and Summaries

Read-only aggregations over the document. They never raise: a missing
month or year sums to zero, and amounts that are null, non-numeric or
non-finite count as zero.
"""

import math
from typing import Any

from pydantic import BaseModel, Field

from notebk.models.state import AppState
from notebk.state.keys import MONTH_NAMES


def to_number(value: Any) -> float:
    """Amount as a float, or 0.0 when it is not a finite number."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class MonthTotals(BaseModel):
    """Income and expense totals of one month of the ledger."""
    income: float = 0.0
    expense: float = 0.0

    @property
    def balance(self) -> float:
        return self.income - self.expense


class MonthSummary(MonthTotals):
    """One line of the annual summary."""
    name: str = Field(..., description="Spanish month name")
    key: str = Field(..., description="Month key (YYYY-MM)")


class AnnualSummary(BaseModel):
    """Month-by-month ledger totals for one year."""
    year: str
    months: list[MonthSummary] = Field(default_factory=list)
    totals: MonthTotals = Field(default_factory=MonthTotals)


def expense_totals(state: AppState, month: str) -> MonthTotals:
    rows = state.expenses.get(month, [])
    return MonthTotals(
        income=sum(to_number(row.income) for row in rows),
        expense=sum(to_number(row.expense) for row in rows),
    )


def savings_total(state: AppState, year: str) -> float:
    """Sum of every savings cell of a year; unset months add nothing."""
    return sum(
        (to_number(amount) for amount in state.savings.get(year, {}).values()),
        0.0,
    )


def annual_summary(state: AppState, year: str) -> AnnualSummary:
    months = []
    for index, name in enumerate(MONTH_NAMES, start=1):
        key = f"{year}-{index:02d}"
        totals = expense_totals(state, key)
        months.append(MonthSummary(
            name=name,
            key=key,
            income=totals.income,
            expense=totals.expense,
        ))

    return AnnualSummary(
        year=year,
        months=months,
        totals=MonthTotals(
            income=sum(m.income for m in months),
            expense=sum(m.expense for m in months),
        ),
    )


def days_with_notes(state: AppState, month: str) -> list[str]:
    """Day keys of a month that have a non-blank diary entry, sorted."""
    prefix = f"{month}-"
    return sorted(
        key for key, text in state.notes.items()
        if key.startswith(prefix) and text.strip()
    )
