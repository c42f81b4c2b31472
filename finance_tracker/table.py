"""Transaction table helpers: sorting, totals and outgoing payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .aggregation import aggregate
from .classification import is_income
from .models import Summary, Transaction, amount_of, coerce_amount

SORT_KEYS = ('date', 'merchant', 'amount', 'category')
TABLE_COLUMNS = ['id', 'date', 'merchant', 'amount', 'category', 'notes']


def _date_sort_value(value: Any) -> float:
    if not value:
        return 0.0
    try:
        return datetime.fromisoformat(str(value).strip()[:10]).timestamp()
    except ValueError:
        return 0.0


def _sort_value(tx: Mapping[str, Any], key: str) -> Any:
    if key == 'date':
        return _date_sort_value(tx.get('date'))
    if key == 'amount':
        return amount_of(tx)
    return str(tx.get(key) or '').lower()


def sort_transactions(
    items: Sequence[Mapping[str, Any]],
    key: str = 'date',
    direction: str = 'desc',
) -> List[Mapping[str, Any]]:
    """Return a sorted copy of ``items``; ties keep their incoming order.

    Unparsable dates sort as the epoch and missing amounts as zero.
    """
    if key not in SORT_KEYS:
        key = 'date'
    return sorted(items, key=lambda tx: _sort_value(tx, key), reverse=direction == 'desc')


def toggle_sort(current_key: str, current_direction: str, clicked: str) -> Tuple[str, str]:
    """New ``(key, direction)`` after clicking a column header.

    Clicking the active column flips the direction; clicking another column
    selects it, descending for ``date`` and ascending otherwise.
    """
    if clicked == current_key:
        return clicked, 'asc' if current_direction == 'desc' else 'desc'
    return clicked, 'desc' if clicked == 'date' else 'asc'


def sort_icon(key: str, active_key: str, direction: str) -> str:
    if key != active_key:
        return '↕'
    return '▲' if direction == 'asc' else '▼'


def shown_totals(items: Sequence[Mapping[str, Any]]) -> Summary:
    """Totals footer for the rows currently shown."""
    return aggregate(items)


def transactions_frame(items: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
    """Display frame for the table with a signed-flow column.

    Amounts are shown as absolute values; ``flow`` says which side of the
    ledger the classifier put them on.
    """
    if not items:
        return pd.DataFrame(columns=TABLE_COLUMNS + ['flow'])
    rows = []
    for tx in items:
        rows.append({
            'id': tx.get('id'),
            'date': tx.get('date') or '',
            'merchant': tx.get('merchant') or '',
            'amount': abs(amount_of(tx)),
            'category': tx.get('category') or '',
            'notes': tx.get('notes') or '',
            'flow': 'Income' if is_income(tx) else 'Expense',
        })
    return pd.DataFrame(rows, columns=TABLE_COLUMNS + ['flow'])


def form_transaction(
    kind: str,
    amount: Any,
    tx_date: Optional[date] = None,
    merchant: str = '',
    category: str = '',
    notes: str = '',
) -> Transaction:
    """Build the payload of the add-transaction form.

    The writer convention stores expenses positive and income negative,
    whatever sign the user typed.
    """
    value = abs(coerce_amount(amount))
    signed = -value if (kind or 'expense') == 'income' else value
    return Transaction(
        date=(tx_date or date.today()).isoformat(),
        merchant=(merchant or '').strip(),
        amount=signed,
        category=(category or '').strip() or 'Other',
        notes=(notes or '').strip(),
    )


def duplicate_transaction(tx: Mapping[str, Any], today: Optional[date] = None) -> Transaction:
    """Copy of ``tx`` dated today, without its id."""
    notes = tx.get('notes')
    return Transaction(
        date=(today or date.today()).isoformat(),
        merchant=str(tx.get('merchant') or ''),
        amount=amount_of(tx),
        category=str(tx.get('category') or ''),
        notes=str(notes) if notes is not None else None,
    )


def filters_for_week(month_bounds: Tuple[str, str], selected: Optional[int], clicked: int,
                     week_bounds: Sequence[Tuple[str, str]]) -> Tuple[Optional[int], Dict[str, str]]:
    """Date filter after clicking a week bar.

    Clicking the selected week again clears the selection and restores the
    whole month.
    """
    if selected == clicked or not 0 <= clicked < len(week_bounds):
        return None, {'from': month_bounds[0], 'to': month_bounds[1]}
    start, end = week_bounds[clicked]
    return clicked, {'from': start, 'to': end}
