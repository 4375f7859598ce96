"""
State Mutators

Every edit the UI can make is a pure function:

    (AppState, edit intent) -> AppState

RULES:
1. The input document is never modified.
2. Only the mapping entry on the edited path is rebuilt; every other
   mapping and entry is the same object as in the input.
3. Lists are replaced wholesale: adding, editing or deleting a row
   computes the full new list and substitutes it.
4. An edit that would change nothing returns the input document itself.
"""

from datetime import date
from typing import Any, Iterable, Optional, TypeVar, Union

from pydantic import BaseModel

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
from notebk.state.keys import MONTH_NAMES, date_label, new_id


ModelT = TypeVar("ModelT", bound=BaseModel)

EXPENSE_FIELDS = frozenset({"date", "concept", "income", "expense"})
TABLE_ROW_FIELDS = frozenset({"val1", "val2"})


def _coerce(model: type[ModelT], items: Iterable[Union[ModelT, dict]]) -> list[ModelT]:
    return [
        item if isinstance(item, model) else model.model_validate(item)
        for item in items
    ]


def _check_fields(changes: dict[str, Any], editable: frozenset) -> None:
    unknown = sorted(set(changes) - editable)
    if unknown:
        raise ValueError(f"Cannot edit field(s): {', '.join(unknown)}")


def _check_text(text: Any) -> str:
    if not isinstance(text, str):
        raise ValueError(f"Expected text, got {type(text).__name__}")
    return text


def _edited(item: ModelT, changes: dict[str, Any]) -> ModelT:
    """Copy of item with changes applied and re-validated."""
    return type(item).model_validate({**item.model_dump(), **changes})


# =============================================================================
# NOTES
# =============================================================================

def set_note(state: AppState, day: str, text: str) -> AppState:
    """Set the diary entry for a day. An empty string is kept, not deleted."""
    return state.model_copy(update={"notes": {**state.notes, day: _check_text(text)}})


def set_monthly_note(state: AppState, month: str, text: str) -> AppState:
    return state.model_copy(
        update={"monthly_notes": {**state.monthly_notes, month: _check_text(text)}}
    )


# =============================================================================
# EXPENSES
# =============================================================================

def set_expenses(
    state: AppState,
    month: str,
    rows: Iterable[Union[Expense, dict]],
) -> AppState:
    """Replace the whole ledger of a month."""
    return state.model_copy(
        update={"expenses": {**state.expenses, month: _coerce(Expense, rows)}}
    )


def add_expense(
    state: AppState,
    month: str,
    concept: str = "",
    income: Optional[float] = 0.0,
    expense: Optional[float] = 0.0,
    label: Optional[str] = None,
    expense_id: Optional[str] = None,
    today: Optional[date] = None,
) -> AppState:
    """Append a ledger row. The day label defaults to today's dd/MM."""
    row = Expense(
        id=expense_id or new_id(),
        date=label if label is not None else date_label(today or date.today()),
        concept=concept,
        income=income,
        expense=expense,
    )
    return set_expenses(state, month, [*state.expenses.get(month, []), row])


def update_expense(
    state: AppState,
    month: str,
    expense_id: str,
    **changes: Any,
) -> AppState:
    """Change fields (date, concept, income, expense) of one ledger row."""
    _check_fields(changes, EXPENSE_FIELDS)
    rows = state.expenses.get(month, [])
    if not any(row.id == expense_id for row in rows):
        return state
    return set_expenses(
        state,
        month,
        [_edited(row, changes) if row.id == expense_id else row for row in rows],
    )


def delete_expense(state: AppState, month: str, expense_id: str) -> AppState:
    rows = state.expenses.get(month, [])
    kept = [row for row in rows if row.id != expense_id]
    if len(kept) == len(rows):
        return state
    return set_expenses(state, month, kept)


# =============================================================================
# SAVINGS
# =============================================================================

def set_saving(
    state: AppState,
    year: str,
    month: str,
    amount: Optional[float],
) -> AppState:
    """
    Set one savings cell. Creates the year if needed; other months of
    that year are left as they are.
    Amounts go through parse_amount, so anything that is not a number
    is stored as null.

    Raises:
        ValueError: If month is not one of the Spanish month names
    """
    if month not in MONTH_NAMES:
        raise ValueError(f"Unknown month name: {month!r}")
    year_savings = {**state.savings.get(year, {}), month: parse_amount(amount)}
    return state.model_copy(
        update={"savings": {**state.savings, year: year_savings}}
    )


# =============================================================================
# HEALTH
# =============================================================================

def set_health_items(
    state: AppState,
    year: str,
    items: Iterable[Union[HealthItem, dict]],
) -> AppState:
    """Replace the whole checklist of a year."""
    return state.model_copy(
        update={"health": {**state.health, year: _coerce(HealthItem, items)}}
    )


def add_health_item(
    state: AppState,
    year: str,
    title: str,
    item_id: Optional[str] = None,
) -> AppState:
    """Append an unchecked item. A blank title is ignored."""
    if not title.strip():
        return state
    item = HealthItem(id=item_id or new_id(), title=title, completed=False)
    return set_health_items(state, year, [*state.health.get(year, []), item])


def toggle_health_item(state: AppState, year: str, item_id: str) -> AppState:
    items = state.health.get(year, [])
    if not any(item.id == item_id for item in items):
        return state
    return set_health_items(
        state,
        year,
        [
            _edited(item, {"completed": not item.completed}) if item.id == item_id else item
            for item in items
        ],
    )


def delete_health_item(state: AppState, year: str, item_id: str) -> AppState:
    items = state.health.get(year, [])
    kept = [item for item in items if item.id != item_id]
    if len(kept) == len(items):
        return state
    return set_health_items(state, year, kept)


# =============================================================================
# CUSTOM TABLES
# =============================================================================

def _set_tables(state: AppState, year: str, tables: list[CustomTable]) -> AppState:
    return state.model_copy(
        update={"custom_tables": {**state.custom_tables, year: tables}}
    )


def find_table(state: AppState, year: str, table_id: str) -> Optional[CustomTable]:
    for table in state.custom_tables.get(year, []):
        if table.id == table_id:
            return table
    return None


def add_custom_table(
    state: AppState,
    year: str,
    title: str,
    col1_title: str = "",
    col2_title: str = "",
    color: str = DEFAULT_TABLE_COLOR,
    icon: str = DEFAULT_TABLE_ICON,
    table_id: Optional[str] = None,
) -> AppState:
    """
    Append a new empty table to a year.

    Blank column titles become "Columna 1" / "Columna 2".
    A blank table title is ignored.
    """
    if not title.strip():
        return state
    table = CustomTable(
        id=table_id or new_id(),
        title=title,
        col1_title=col1_title or DEFAULT_COLUMN_1_TITLE,
        col2_title=col2_title or DEFAULT_COLUMN_2_TITLE,
        color=color or DEFAULT_TABLE_COLOR,
        icon=icon or DEFAULT_TABLE_ICON,
        rows=[],
    )
    return _set_tables(state, year, [*state.custom_tables.get(year, []), table])


def set_table_rows(
    state: AppState,
    year: str,
    table_id: str,
    rows: Iterable[Union[TableRow, dict]],
) -> AppState:
    """Replace the rows of one table. Unknown table ids change nothing."""
    tables = state.custom_tables.get(year, [])
    if not any(table.id == table_id for table in tables):
        return state
    new_rows = _coerce(TableRow, rows)
    return _set_tables(
        state,
        year,
        [
            table.model_copy(update={"rows": new_rows}) if table.id == table_id else table
            for table in tables
        ],
    )


def delete_custom_table(state: AppState, year: str, table_id: str) -> AppState:
    tables = state.custom_tables.get(year, [])
    kept = [table for table in tables if table.id != table_id]
    if len(kept) == len(tables):
        return state
    return _set_tables(state, year, kept)


def add_table_row(
    state: AppState,
    year: str,
    table_id: str,
    val1: str = "",
    val2: str = "",
    row_id: Optional[str] = None,
) -> AppState:
    table = find_table(state, year, table_id)
    if table is None:
        return state
    row = TableRow(id=row_id or new_id(), val1=val1, val2=val2)
    return set_table_rows(state, year, table_id, [*table.rows, row])


def update_table_row(
    state: AppState,
    year: str,
    table_id: str,
    row_id: str,
    **changes: Any,
) -> AppState:
    """Change val1 and/or val2 of one row."""
    _check_fields(changes, TABLE_ROW_FIELDS)
    table = find_table(state, year, table_id)
    if table is None or not any(row.id == row_id for row in table.rows):
        return state
    return set_table_rows(
        state,
        year,
        table_id,
        [_edited(row, changes) if row.id == row_id else row for row in table.rows],
    )


def delete_table_row(state: AppState, year: str, table_id: str, row_id: str) -> AppState:
    table = find_table(state, year, table_id)
    if table is None:
        return state
    kept = [row for row in table.rows if row.id != row_id]
    if len(kept) == len(table.rows):
        return state
    return set_table_rows(state, year, table_id, kept)
