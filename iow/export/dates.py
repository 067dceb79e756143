"""``DD/Mon/YYYY`` date formatting shared by exports and item details."""

from __future__ import annotations

from datetime import date, datetime

MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _to_date(value: date | datetime | str | None) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date()


def format_date(value: date | datetime | str | None) -> str:
    """Format a date as ``DD/Mon/YYYY`` (e.g. ``20/Jan/2026``).

    Accepts dates, datetimes and ISO-8601 strings. Timezone-aware values
    are shown in local time. Absent or unparseable input gives ``""``.
    """
    d = _to_date(value)
    if d is None:
        return ""
    return f"{d.day:02d}/{MONTH_NAMES[d.month - 1]}/{d.year:04d}"


def parse_display_date(text: str) -> date | None:
    """Parse a ``DD/Mon/YYYY`` string back into a date, or ``None``."""
    try:
        day, month, year = text.strip().split("/")
        return date(int(year), MONTH_NAMES.index(month.title()) + 1, int(day))
    except ValueError:
        return None
