"""CSV export of the transaction table."""

from __future__ import annotations

import csv
import io
from typing import Any, Iterable, Mapping, Optional

EXPORT_COLUMNS = ['id', 'date', 'merchant', 'amount', 'category', 'notes']


def _cell(value: Any) -> str:
    if value is None:
        return ''
    return str(value)


def transactions_to_csv(transactions: Iterable[Mapping[str, Any]]) -> str:
    """Serialise ``transactions`` with a fixed header.

    Fields containing a comma, a quote or a line break are quoted and
    embedded quotes are doubled; everything else is written bare.  Rows
    are separated by ``\\n`` with no trailing newline.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
    writer.writerow(EXPORT_COLUMNS)
    for tx in transactions:
        writer.writerow([_cell(tx.get(column)) for column in EXPORT_COLUMNS])
    return buffer.getvalue().rstrip('\n')


def export_filename(year_month: Optional[str]) -> str:
    """``transactions_202509.csv`` for a month, ``transactions_all.csv`` otherwise."""
    compact = (year_month or '').replace('-', '', 1)
    return f"transactions_{compact or 'all'}.csv"
