"""
Document keys and identifiers.

Every mapping in the document is keyed by a canonical string computed
from a date, never typed by the user:

    day_key    2024-05-01
    month_key  2024-05
    year_key   2024

Savings are keyed inside a year by the Spanish month name.
"""

import re
import time
from datetime import date


MONTH_NAMES = (
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
)

DAY_KEY_PATTERN = re.compile(r"\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])")
MONTH_KEY_PATTERN = re.compile(r"\d{4}-(0[1-9]|1[0-2])")
YEAR_KEY_PATTERN = re.compile(r"\d{4}")


def day_key(d: date) -> str:
    return d.strftime("%Y-%m-%d")


def month_key(d: date) -> str:
    return d.strftime("%Y-%m")


def year_key(d: date) -> str:
    return d.strftime("%Y")


def month_name(d: date) -> str:
    """Spanish name of the month, as used for savings cells."""
    return MONTH_NAMES[d.month - 1]


def date_label(d: date) -> str:
    """Default day label for a new ledger row (dd/MM)."""
    return d.strftime("%d/%m")


def new_id() -> str:
    """
    High-resolution timestamp id.

    Unique in practice for ids created by one user; collisions are not
    guarded against.
    """
    return str(time.time_ns())
