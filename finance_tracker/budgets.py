"""Monthly budget limits and budget alerts.

:class:`BudgetBook` holds the user's per-category monthly limits and
persists them to the injected key-value store.  :func:`evaluate` turns
the limits and a month of transactions into alerts with a severity and
a pacing indicator.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .classification import classify
from .logger import get_logger
from .models import BudgetAlert, Flow, Severity, amount_of, normalize_category
from .months import days_elapsed, days_in_month
from .storage import BUDGETS_KEY, KeyValueStore, read_value, write_value

logger = get_logger(__name__)

WARNING_RATIO = 0.8
CRITICAL_RATIO = 1.0


def severity_for(ratio: float) -> Severity:
    if ratio >= CRITICAL_RATIO:
        return Severity.CRITICAL
    if ratio >= WARNING_RATIO:
        return Severity.WARNING
    return Severity.NORMAL


def spend_by_category(transactions: Iterable[Mapping[str, Any]]) -> Dict[str, float]:
    """Absolute expense per normalized category."""
    spent: Dict[str, float] = {}
    for tx in transactions:
        if classify(tx) is not Flow.EXPENSE:
            continue
        key = normalize_category(tx.get('category'))
        spent[key] = spent.get(key, 0.0) + abs(amount_of(tx))
    return spent


def evaluate(
    budgets: Mapping[str, float],
    transactions: Iterable[Mapping[str, Any]],
    year_month: str,
    today: Optional[date] = None,
) -> List[BudgetAlert]:
    """Build budget alerts for ``year_month``.

    Args:
        budgets: Category name to monthly limit
        transactions: Records of the month being evaluated
        year_month: ``YYYY-MM`` key used for pacing
        today: Reference date for pacing; defaults to ``date.today()``

    Returns:
        Alerts sorted by spend ratio, highest first

    Example:
        >>> alerts = evaluate({'Food': 100}, [{'amount': 80, 'category': 'food'}], '2020-01')
        >>> alerts[0].severity
        <Severity.WARNING: 'warning'>
    """
    spent_by_norm = spend_by_category(transactions)
    total_days = days_in_month(year_month)
    elapsed = days_elapsed(year_month, today)

    alerts: List[BudgetAlert] = []
    for category, raw_limit in budgets.items():
        limit = float(raw_limit)
        spent = spent_by_norm.get(normalize_category(category), 0.0)
        ratio = spent / limit if limit > 0 else 0.0
        expected = limit * elapsed / total_days if total_days else 0.0
        alerts.append(
            BudgetAlert(
                category=category,
                limit=limit,
                spent=spent,
                ratio=ratio,
                severity=severity_for(ratio),
                percent=min(100, int(round(ratio * 100))),
                expected=expected,
                delta=spent - expected,
            )
        )
    alerts.sort(key=lambda alert: alert.ratio, reverse=True)
    return alerts


class BudgetBook:
    """Per-category monthly limits, at most one per normalized name."""

    def __init__(self, store: KeyValueStore, key: str = BUDGETS_KEY):
        self.store = store
        self.key = key
        self._budgets = self._load()

    def _load(self) -> Dict[str, float]:
        raw = read_value(self.store, self.key, {})
        if not isinstance(raw, dict):
            return {}
        budgets: Dict[str, float] = {}
        for name, value in raw.items():
            try:
                limit = float(value)
            except (TypeError, ValueError):
                continue
            if math.isfinite(limit) and limit > 0:
                budgets[str(name)] = limit
        return budgets

    def _persist(self) -> None:
        write_value(self.store, self.key, dict(self._budgets))

    @property
    def budgets(self) -> Dict[str, float]:
        return dict(self._budgets)

    def __len__(self) -> int:
        return len(self._budgets)

    def __contains__(self, category: object) -> bool:
        norm = normalize_category(category)
        return any(normalize_category(name) == norm for name in self._budgets)

    def _without(self, category: str) -> Dict[str, float]:
        norm = normalize_category(category)
        return {name: limit for name, limit in self._budgets.items() if normalize_category(name) != norm}

    def set(self, category: str, limit: Any) -> str:
        """Add or replace the limit for ``category``.

        Any existing entry whose normalized name matches is removed first,
        so ``'food'`` replaces ``'Food '``.

        Returns:
            The trimmed category name the limit was stored under

        Raises:
            ValueError: If the category is empty or the limit is not a
                positive finite number
        """
        name = (category or '').strip()
        try:
            value = float(limit)
        except (TypeError, ValueError):
            value = float('nan')
        if not name or not math.isfinite(value) or value <= 0:
            raise ValueError("Enter a category and a positive limit.")
        budgets = self._without(name)
        budgets[name] = value
        self._budgets = budgets
        self._persist()
        logger.info("Saved budget %s -> %.2f", name, value)
        return name

    def remove(self, category: str) -> bool:
        """Remove the limit for ``category``; returns whether anything changed."""
        budgets = self._without(category)
        if len(budgets) == len(self._budgets):
            return False
        self._budgets = budgets
        self._persist()
        logger.info("Removed budget %s", category)
        return True
