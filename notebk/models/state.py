"""
Application State Models for notebk

The whole application is one document, AppState. It is made of six
independent mappings keyed by canonical date strings:

    expenses      YYYY-MM     -> [Expense]
    savings       YYYY        -> {month name -> amount}
    notes         YYYY-MM-DD  -> diary text
    monthlyNotes  YYYY-MM     -> free text
    health        YYYY        -> [HealthItem]
    customTables  YYYY        -> [CustomTable]

DESIGN DECISION: Models are frozen. Edits never patch a model in place;
they build a new document with model_copy(update=...), so every path
that was not touched is shared with the previous document.

JSON field names stay camelCase (monthlyNotes, col1Title, ...) so that
documents written by earlier versions of the app load unchanged.
"""

import math
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


DEFAULT_COLUMN_1_TITLE = "Columna 1"
DEFAULT_COLUMN_2_TITLE = "Columna 2"
DEFAULT_TABLE_COLOR = "#000000"
DEFAULT_TABLE_ICON = "list"


def parse_amount(value: Any) -> Optional[float]:
    """
    Turn user or stored input into an amount.

    Returns None for anything that is not a finite number ("", "abc",
    NaN). None is stored as null and counts as zero in totals.
    Accepts a comma as decimal separator ("12,50").
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


class DocumentModel(BaseModel):
    """Base for every model stored inside the document."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )


class Expense(DocumentModel):
    """
    One row of the monthly ledger.

    Amounts are nullable: a cleared or unparseable input is stored as
    null and counts as zero in every total.
    """
    id: str = Field(..., description="Row id, unique within the month")
    date: str = Field(default="", description="Free-form day label, e.g. '01/05'")
    concept: str = Field(default="", description="What the money was for")
    income: Optional[float] = Field(default=0.0, description="Money in")
    expense: Optional[float] = Field(default=0.0, description="Money out")

    @field_validator('income', 'expense', mode='before')
    @classmethod
    def lenient_amount(cls, v):
        return parse_amount(v)


class HealthItem(DocumentModel):
    """A yearly health checklist entry."""
    id: str
    title: str
    completed: bool = False


class TableRow(DocumentModel):
    """A row of a user-defined two-column table."""
    id: str
    val1: str = ""
    val2: str = ""


class CustomTable(DocumentModel):
    """A user-defined two-column list, grouped by year."""
    id: str
    title: str
    col1_title: str = Field(default=DEFAULT_COLUMN_1_TITLE, alias="col1Title")
    col2_title: str = Field(default=DEFAULT_COLUMN_2_TITLE, alias="col2Title")
    color: str = Field(default=DEFAULT_TABLE_COLOR, description="Accent color")
    icon: str = Field(default=DEFAULT_TABLE_ICON, description="Icon identifier")
    rows: list[TableRow] = Field(default_factory=list)

    @field_validator('rows', mode='before')
    @classmethod
    def null_rows_are_empty(cls, v):
        return [] if v is None else v


class AppState(DocumentModel):
    """
    The single persisted document.

    A missing mapping and a null mapping both mean "empty"; readers
    never have to distinguish them.
    """
    expenses: dict[str, list[Expense]] = Field(default_factory=dict)
    savings: dict[str, dict[str, Optional[float]]] = Field(default_factory=dict)
    notes: dict[str, str] = Field(default_factory=dict)
    monthly_notes: dict[str, str] = Field(default_factory=dict, alias="monthlyNotes")
    health: dict[str, list[HealthItem]] = Field(default_factory=dict)
    custom_tables: dict[str, list[CustomTable]] = Field(
        default_factory=dict,
        alias="customTables",
    )

    @field_validator('*', mode='before')
    @classmethod
    def null_mappings_are_empty(cls, v):
        return {} if v is None else v

    @field_validator('savings', mode='before')
    @classmethod
    def lenient_savings(cls, v):
        if not isinstance(v, dict):
            return v
        return {
            year: (
                {name: parse_amount(amount) for name, amount in months.items()}
                if isinstance(months, dict) else months
            )
            for year, months in v.items()
        }

    def to_document(self) -> dict:
        """Plain JSON-compatible dict using the stored (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        """Compact, key-order-stable JSON text of the whole document."""
        return self.model_dump_json(by_alias=True)
