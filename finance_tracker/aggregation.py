"""Summary aggregation and month-over-month comparison.

This module provides the totals shown in the monthly summary panel:

* :func:`aggregate` computes income, expense, net, count and per-category
  expense from a list of transaction records.
* :func:`coalesce_summary` merges an authoritative summary payload from
  the REST service with the locally computed aggregate, field by field.
* :func:`compare_summaries` and :func:`percent_change` produce the
  month-over-month deltas.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .classification import classify
from .models import Flow, MetricDelta, Summary, amount_of, display_category

# Payload keys accepted for each summary field, in order of preference.
SUMMARY_ALIASES: Dict[str, Tuple[str, ...]] = {
    'per_category_expense': ('byCategory', 'categoryTotals'),
    'income': ('totalIncome', 'income'),
    'expense': ('totalExpense', 'expense'),
    'net': ('net',),
    'count': ('count',),
}

COMPARED_METRICS = ('income', 'expense', 'net')


def aggregate(transactions: Iterable[Mapping[str, Any]]) -> Summary:
    """Compute summary totals for ``transactions``.

    Amounts are summed as absolute values on both sides; the classifier
    decides which side a record lands on.

    Example:
        >>> s = aggregate([{'amount': -50, 'category': 'Salary'},
        ...                {'amount': 20, 'category': 'Food'}])
        >>> (s.income, s.expense, s.net)
        (50.0, 20.0, 30.0)
    """
    income = 0.0
    expense = 0.0
    count = 0
    per_category: Dict[str, float] = {}
    for tx in transactions:
        count += 1
        amount = abs(amount_of(tx))
        if classify(tx) is Flow.INCOME:
            income += amount
            continue
        expense += amount
        name = display_category(tx.get('category'))
        per_category[name] = per_category.get(name, 0.0) + amount
    return Summary(
        income=income,
        expense=expense,
        net=income - expense,
        count=count,
        per_category_expense=per_category,
    )


def total_expense(transactions: Iterable[Mapping[str, Any]]) -> float:
    return sum(abs(amount_of(tx)) for tx in transactions if classify(tx) is Flow.EXPENSE)


def _first_present(payload: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _as_category_totals(value: Any) -> Optional[Dict[str, float]]:
    if not isinstance(value, Mapping):
        return None
    totals: Dict[str, float] = {}
    for name, amount in value.items():
        number = _as_number(amount)
        totals[str(name)] = number if number is not None else 0.0
    return totals


def coalesce_summary(
    payload: Any,
    transactions: Sequence[Mapping[str, Any]] = (),
) -> Summary:
    """Merge a server summary payload with the locally computed aggregate.

    Each field of the payload wins when present (under any of its
    :data:`SUMMARY_ALIASES`); missing or unusable fields fall back to the
    aggregate of ``transactions``.  ``net`` falls back to the coalesced
    income minus the coalesced expense rather than the local net, so a
    payload that only carries income and expense stays self-consistent.

    Args:
        payload: Decoded JSON from ``GET /tx/summary``; anything that is not
            a mapping counts as an empty payload
        transactions: Locally fetched records for the same month

    Returns:
        The coalesced :class:`Summary`
    """
    source: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
    local = aggregate(transactions)

    per_category = _as_category_totals(
        _first_present(source, SUMMARY_ALIASES['per_category_expense'])
    )
    income = _as_number(_first_present(source, SUMMARY_ALIASES['income']))
    expense = _as_number(_first_present(source, SUMMARY_ALIASES['expense']))
    income = local.income if income is None else income
    expense = local.expense if expense is None else expense

    net = _as_number(_first_present(source, SUMMARY_ALIASES['net']))
    count = _as_number(_first_present(source, SUMMARY_ALIASES['count']))

    return Summary(
        income=income,
        expense=expense,
        net=income - expense if net is None else net,
        count=len(transactions) if count is None else int(count),
        per_category_expense=local.per_category_expense if per_category is None else per_category,
    )


def percent_change(current: float, previous: float) -> Optional[float]:
    """Percent change from ``previous`` to ``current``.

    Returns ``None`` when ``previous`` is zero (within ``1e-9``) or not a
    finite number, so callers never divide by zero.
    """
    previous_value = _as_number(previous)
    current_value = _as_number(current)
    if previous_value is None or current_value is None or abs(previous_value) < 1e-9:
        return None
    return (current_value - previous_value) / previous_value * 100


def compare_summaries(current: Summary, previous: Summary) -> List[MetricDelta]:
    """Income, expense and net deltas between two months."""
    deltas: List[MetricDelta] = []
    for metric in COMPARED_METRICS:
        cur = getattr(current, metric)
        prev = getattr(previous, metric)
        deltas.append(
            MetricDelta(
                metric=metric,
                current=cur,
                previous=prev,
                delta=cur - prev,
                percent_change=percent_change(cur, prev),
            )
        )
    return deltas
