"""Calendar helpers for YNAB budget months.

YNAB identifies a budget month by its first day (``YYYY-MM-DD``). These
helpers treat a month as a closed range of dates; nothing here touches
timezones or wall-clock instants.
"""

from __future__ import annotations

import calendar
import re
from datetime import date

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})(?:-(\d{2}))?$")


def parse_month(value: str | None) -> date | None:
    """Parse ``YYYY-MM-DD`` or ``YYYY-MM`` into the first day of that month.

    Returns ``None`` for anything malformed, including impossible dates
    such as ``2024-02-30``.
    """
    if not value:
        return None
    match = _MONTH_RE.match(value.strip())
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    day = int(match.group(3)) if match.group(3) else 1
    try:
        date(year, month, day)
    except ValueError:
        return None
    return date(year, month, 1)


def to_month_start(value: str | date | None) -> date | None:
    """Accept a month as a string or a date; return its first day or ``None``."""
    if isinstance(value, date):
        return value.replace(day=1)
    return parse_month(value)


def is_valid_month(value: str | None) -> bool:
    return parse_month(value) is not None


def first_day_of_month(d: date) -> str:
    """Format *d*'s month the way YNAB does (``YYYY-MM-01``)."""
    return d.replace(day=1).isoformat()


def shift_month(d: date, months: int) -> date:
    """Move *d* by a number of calendar months, landing on the 1st."""
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def previous_month(month: str) -> str:
    parsed = parse_month(month)
    if parsed is None:
        raise ValueError(f"Invalid month: {month!r}")
    return first_day_of_month(shift_month(parsed, -1))


def next_month(month: str) -> str:
    parsed = parse_month(month)
    if parsed is None:
        raise ValueError(f"Invalid month: {month!r}")
    return first_day_of_month(shift_month(parsed, 1))


def months_between(start: date, end: date) -> int:
    """Number of calendar months from *start* to *end* (negative if earlier)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def count_weekday_occurrences(year: int, month: int, ynab_weekday: int) -> int:
    """Count how many times a weekday falls within a calendar month.

    *ynab_weekday* uses YNAB's numbering (0=Sunday .. 6=Saturday), which
    differs from :meth:`date.weekday` (0=Monday).
    """
    if not 0 <= ynab_weekday <= 6:
        raise ValueError(f"Weekday must be 0-6, got {ynab_weekday}")
    python_weekday = (ynab_weekday - 1) % 7
    days_in_month = calendar.monthrange(year, month)[1]
    return sum(
        1
        for day in range(1, days_in_month + 1)
        if date(year, month, day).weekday() == python_weekday
    )
