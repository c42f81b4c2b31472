"""Typed records exchanged between the core helpers and the dashboard.

Transactions arrive from the REST service as plain JSON mappings and are
kept that way throughout the core; :class:`Transaction` is used for the
payloads the dashboard sends back.  The remaining dataclasses are the
derived results rendered by the UI.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

TYPE_FIELDS = ('type', 'txType', 'kind')
UNCATEGORIZED = 'Uncategorized'

# Choices offered by the add-transaction form, the filter bar and budgets
CATEGORIES = (
    'Food',
    'Groceries',
    'Transport',
    'Rent',
    'Utilities',
    'Shopping',
    'Entertainment',
    'Health',
    'Travel',
    'Salary',
    'Other',
)


class Flow(str, Enum):
    """Cash-flow direction of a transaction."""

    INCOME = 'income'
    EXPENSE = 'expense'


class Severity(str, Enum):
    NORMAL = 'normal'
    WARNING = 'warning'
    CRITICAL = 'critical'


@dataclass
class Transaction:
    date: str
    merchant: str
    amount: float
    category: str
    notes: Optional[str] = None
    id: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for ``POST /tx``; the id is assigned by the service."""
        payload = asdict(self)
        payload.pop('id', None)
        if payload['notes'] is None:
            payload['notes'] = ''
        return payload


@dataclass
class Summary:
    income: float = 0.0
    expense: float = 0.0
    net: float = 0.0
    count: int = 0
    per_category_expense: Dict[str, float] = field(default_factory=dict)

    def category_shares(self) -> Dict[str, int]:
        """Whole-number percent of total expense per category."""
        if self.expense <= 0:
            return {name: 0 for name in self.per_category_expense}
        return {
            name: int(round(spent / self.expense * 100))
            for name, spent in self.per_category_expense.items()
        }


@dataclass
class MetricDelta:
    metric: str
    current: float
    previous: float
    delta: float
    percent_change: Optional[float]


@dataclass
class WeekBucket:
    label: str
    start_date: str
    end_date: str
    total_expense: float
    start_day: int
    end_day: int

    @property
    def short_label(self) -> str:
        return self.label.split(' ')[0]


@dataclass
class BudgetAlert:
    category: str
    limit: float
    spent: float
    ratio: float
    severity: Severity
    percent: int
    expected: float
    delta: float

    @property
    def pace(self) -> str:
        """``'over'``, ``'under'`` or ``'on'`` pace; informational only."""
        if self.delta > 0.01:
            return 'over'
        if self.delta < -0.01:
            return 'under'
        return 'on'


def coerce_amount(value: Any) -> float:
    """Numeric amount of a record field; non-numeric or non-finite become ``0.0``."""
    if isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def amount_of(tx: Mapping[str, Any]) -> float:
    return coerce_amount(tx.get('amount'))


def type_of(tx: Mapping[str, Any]) -> str:
    """First non-empty type-like field, lowercased."""
    for name in TYPE_FIELDS:
        value = tx.get(name)
        if value:
            return str(value).lower()
    return ''


def display_category(value: Any) -> str:
    """Trimmed category, ``'Uncategorized'`` when blank."""
    text = str(value).strip() if value is not None else ''
    return text or UNCATEGORIZED


def normalize_category(value: Any) -> str:
    """Case and whitespace-insensitive key for a category name."""
    return display_category(value).lower()
