"""Document keys and pure edit functions."""

from notebk.state.keys import (
    MONTH_NAMES,
    date_label,
    day_key,
    month_key,
    month_name,
    new_id,
    year_key,
)
from notebk.state import mutators

__all__ = [
    "MONTH_NAMES",
    "date_label",
    "day_key",
    "month_key",
    "month_name",
    "mutators",
    "new_id",
    "year_key",
]
