"""Cell normalization -- turns raw spreadsheet / delimited values into stripped strings."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable

from bulkfiling.core.types import Row


def cell_to_str(value: Any) -> str:
    """Render one cell the way the parsers expect it.

    Empty cells become "", dates are written as ISO ``YYYY-MM-DD`` and
    integral floats lose their ``.0`` (spreadsheets store IDs as numbers).
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def clean_row(values: Iterable[Any], trim_trailing: bool = False) -> Row:
    """Convert a row of raw cells; optionally drop trailing empty cells."""
    row = [cell_to_str(v) for v in values]
    if trim_trailing:
        while row and not row[-1]:
            row.pop()
    return row


def is_blank(row: Row) -> bool:
    return not any(row)


def cell(row: Row, index: int, default: str = "") -> str:
    """Cell at ``index`` or ``default`` when the row is short or the cell is empty."""
    if index < len(row):
        value = row[index].strip()
        if value:
            return value
    return default
