"""Calendar helpers for ``YYYY-MM`` month keys.

Every function here is tolerant of malformed input: an unparsable month
key yields ``None`` (or an empty string for display helpers) instead of
raising, so the dashboard keeps rendering on dirty preferences.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Optional, Tuple

_MONTH_ABBR = list(calendar.month_abbr)


def parse_month(year_month: Optional[str]) -> Optional[Tuple[int, int]]:
    """Split a ``YYYY-MM`` key into ``(year, month)``.

    Returns ``None`` when the key is missing, malformed or out of range.

    Example:
        >>> parse_month('2024-02')
        (2024, 2)
        >>> parse_month('2024-13') is None
        True
    """
    if not year_month or not isinstance(year_month, str):
        return None
    parts = year_month.strip().split('-')
    if len(parts) != 2:
        return None
    try:
        year, month = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if year < 1 or not 1 <= month <= 12:
        return None
    return year, month


def days_in_month(year_month: Optional[str]) -> int:
    """Number of days in the month, or ``0`` for an invalid key."""
    parsed = parse_month(year_month)
    if parsed is None:
        return 0
    return calendar.monthrange(*parsed)[1]


def month_bounds(year_month: Optional[str]) -> Optional[Tuple[str, str]]:
    """ISO first and last day of the month, e.g. ``('2024-02-01', '2024-02-29')``."""
    parsed = parse_month(year_month)
    if parsed is None:
        return None
    year, month = parsed
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1).isoformat(), date(year, month, last).isoformat()


def previous_month(year_month: Optional[str]) -> str:
    """The month before ``year_month``; empty string for an invalid key."""
    parsed = parse_month(year_month)
    if parsed is None:
        return ''
    year, month = parsed
    if month == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{month - 1:02d}"


def month_label(year_month: Optional[str]) -> str:
    """Short display label such as ``'Sep 2025'``; the raw key when invalid."""
    parsed = parse_month(year_month)
    if parsed is None:
        return year_month or ''
    year, month = parsed
    return f"{_MONTH_ABBR[month]} {year}"


def days_elapsed(year_month: Optional[str], today: Optional[date] = None) -> int:
    """Days of the month that have already passed relative to ``today``.

    A past month counts in full, a future month counts as zero and the
    current month counts up to today's day of month.
    """
    parsed = parse_month(year_month)
    if parsed is None:
        return 0
    today = today or date.today()
    year, month = parsed
    total = calendar.monthrange(year, month)[1]
    if (year, month) < (today.year, today.month):
        return total
    if (year, month) > (today.year, today.month):
        return 0
    return min(today.day, total)


def day_of_month(value: object, year_month: str) -> Optional[int]:
    """Day-of-month of an ISO date string when it falls in ``year_month``.

    Only the ``YYYY-MM-DD`` prefix is inspected, so timestamps with a time
    part are accepted.  Anything else returns ``None``.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()[:10]
    parts = text.split('-')
    if len(parts) != 3:
        return None
    target = parse_month(year_month)
    if target is None or parse_month(f"{parts[0]}-{parts[1]}") != target:
        return None
    try:
        day = int(parts[2])
    except ValueError:
        return None
    return day if day >= 1 else None
