"""Income/expense classification of transaction records.

Records come from several writers and do not agree on a sign convention,
so the direction is decided by an ordered chain of rules.  Each rule
returns a :class:`Flow` when it has an opinion and ``None`` otherwise;
the first opinion wins.  The final rule always answers, so every record
classifies without raising.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from .models import Flow, amount_of, type_of

INCOME_CATEGORIES = frozenset(
    {'income', 'salary', 'paycheck', 'deposit', 'bonus', 'interest', 'credit'}
)

Rule = Callable[[Mapping[str, Any]], Optional[Flow]]


def type_field_rule(tx: Mapping[str, Any]) -> Optional[Flow]:
    """Explicit ``type``/``txType``/``kind`` field."""
    kind = type_of(tx)
    if 'income' in kind or 'credit' in kind:
        return Flow.INCOME
    if 'expense' in kind or 'debit' in kind:
        return Flow.EXPENSE
    return None


def income_category_rule(tx: Mapping[str, Any]) -> Optional[Flow]:
    """Category names that only ever describe money coming in."""
    category = str(tx.get('category') or '').strip().lower()
    if category in INCOME_CATEGORIES:
        return Flow.INCOME
    return None


def amount_sign_rule(tx: Mapping[str, Any]) -> Optional[Flow]:
    """Writer convention: income is stored negative, expenses positive."""
    amount = amount_of(tx)
    if amount < 0:
        return Flow.INCOME
    if amount > 0:
        return Flow.EXPENSE
    return None


def default_rule(tx: Mapping[str, Any]) -> Optional[Flow]:
    return Flow.EXPENSE


RULES: Tuple[Tuple[str, Rule], ...] = (
    ('type_field', type_field_rule),
    ('income_category', income_category_rule),
    ('amount_sign', amount_sign_rule),
    ('default', default_rule),
)


def classify(tx: Mapping[str, Any], rules: Sequence[Tuple[str, Rule]] = RULES) -> Flow:
    """Return the cash-flow direction of ``tx``.

    Args:
        tx: Transaction mapping as returned by the REST service
        rules: Ordered ``(name, rule)`` pairs; defaults to :data:`RULES`

    Returns:
        ``Flow.INCOME`` or ``Flow.EXPENSE``

    Example:
        >>> classify({'amount': 20, 'category': 'Salary'})
        <Flow.INCOME: 'income'>
        >>> classify({'amount': 0, 'category': 'Food'})
        <Flow.EXPENSE: 'expense'>
    """
    for _name, rule in rules:
        flow = rule(tx)
        if flow is not None:
            return flow
    return Flow.EXPENSE


def deciding_rule(tx: Mapping[str, Any], rules: Sequence[Tuple[str, Rule]] = RULES) -> str:
    """Name of the rule that settles the classification of ``tx``."""
    for name, rule in rules:
        if rule(tx) is not None:
            return name
    return 'default'


def is_income(tx: Mapping[str, Any]) -> bool:
    return classify(tx) is Flow.INCOME


def is_expense(tx: Mapping[str, Any]) -> bool:
    return classify(tx) is Flow.EXPENSE
