"""Date arithmetic shared by the classifier, aggregation, and replacement rule."""

from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Any


def to_date(value: Any) -> date:
    """Coerce a ``date``, ``datetime`` or ISO-8601 string to a calendar date.

    Raises ``ValueError`` for anything else (including malformed strings).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("empty date string")
        try:
            return date.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text).date()
    raise ValueError(f"unsupported date value: {value!r}")


def days_until(target: Any, now: Any) -> int:
    """Whole calendar days from *now* to *target* (negative when already past)."""
    return (to_date(target) - to_date(now)).days


def add_months(start: date, months: int) -> date:
    """Shift *start* by *months*, clamping the day to the end of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
