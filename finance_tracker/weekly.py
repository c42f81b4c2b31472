"""Weekly expense buckets for the monthly bar chart."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, List, Mapping

from .classification import classify
from .models import Flow, WeekBucket, amount_of
from .months import day_of_month, days_in_month, parse_month

WEEK_LENGTH = 7


def week_ranges(total_days: int) -> List[tuple]:
    """Consecutive ``(start, end)`` day windows of seven days.

    The last window is shorter when the month does not end on a multiple
    of seven, e.g. ``(29, 30)``.
    """
    return [
        (start, min(start + WEEK_LENGTH - 1, total_days))
        for start in range(1, total_days + 1, WEEK_LENGTH)
    ]


def weekly_buckets(transactions: Iterable[Mapping[str, Any]], year_month: str) -> List[WeekBucket]:
    """Sum expenses of ``year_month`` into seven-day buckets.

    Records dated outside the month, or whose date cannot be parsed, are
    skipped.  Income records contribute nothing.  An invalid month key
    returns an empty list.
    """
    parsed = parse_month(year_month)
    if parsed is None:
        return []
    year, month = parsed
    ranges = week_ranges(days_in_month(year_month))
    totals = [0.0] * len(ranges)

    for tx in transactions:
        day = day_of_month(tx.get('date'), year_month)
        if day is None:
            continue
        if classify(tx) is not Flow.EXPENSE:
            continue
        for idx, (start, end) in enumerate(ranges):
            if start <= day <= end:
                totals[idx] += abs(amount_of(tx))
                break

    return [
        WeekBucket(
            label=f"W{idx + 1} ({start}–{end})",
            start_date=date(year, month, start).isoformat(),
            end_date=date(year, month, end).isoformat(),
            total_expense=totals[idx],
            start_day=start,
            end_day=end,
        )
        for idx, (start, end) in enumerate(ranges)
    ]
