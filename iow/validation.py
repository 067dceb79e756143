"""Quantity/expiry row validation.

A row is *complete* when day, month and year are all set, and *valid* when
it is complete, the date exists (no day overflow such as 30 February) and
the date is today or later. A row is committed only when it also carries a
quantity.
"""

from __future__ import annotations

from datetime import date

from .models import QuantityEntry, QuantityRow

INVALID_DATE_MESSAGE = "Invalid or past date. Please select a valid future date."


def is_complete(row: QuantityRow) -> bool:
    return bool(row.day) and row.month != "" and bool(row.year)


def row_date(row: QuantityRow) -> date | None:
    """Build the calendar date a row describes, or ``None``.

    ``None`` covers incomplete rows, non-numeric fields, years outside the
    calendar and dates that would roll over into the next month.
    """
    if not is_complete(row):
        return None
    try:
        year = int(row.year)
        month = int(row.month) + 1
        day = int(row.day)
        return date(year, month, day)
    except (ValueError, OverflowError):
        return None


def is_date_valid(row: QuantityRow, today: date | None = None) -> bool:
    expiry = row_date(row)
    if expiry is None:
        return False
    return expiry >= (today or date.today())


def is_filled(row: QuantityRow) -> bool:
    """Row has a quantity and a complete date, valid or not."""
    return bool(row.quantity.strip()) and is_complete(row)


def is_committable(row: QuantityRow, today: date | None = None) -> bool:
    return bool(row.quantity.strip()) and is_date_valid(row, today)


def commit(row: QuantityRow, today: date | None = None) -> QuantityEntry | None:
    """Turn an edited row into a :class:`QuantityEntry`, if it qualifies."""
    if not is_committable(row, today):
        return None
    expiry = row_date(row)
    return QuantityEntry(quantity=row.quantity.strip(), expiry=expiry.isoformat())


def row_error(row: QuantityRow, today: date | None = None) -> str:
    """Inline message for a row, empty when there is nothing to report."""
    if is_complete(row) and not is_date_valid(row, today):
        return INVALID_DATE_MESSAGE
    return ""


def blocking_rows(rows: list[QuantityRow], today: date | None = None) -> list[int]:
    """Indexes of rows that are filled in but carry an invalid date."""
    return [
        index
        for index, row in enumerate(rows)
        if is_filled(row) and not is_date_valid(row, today)
    ]


def committed_entries(
    rows: list[QuantityRow], today: date | None = None
) -> list[QuantityEntry]:
    entries = (commit(row, today) for row in rows)
    return [e for e in entries if e is not None]
