"""Top-level package for the Finance Tracker.

The package is split into a pure core and a Streamlit view layer:

* ``classification`` - income/expense rule chain
* ``aggregation`` - monthly totals, summary coalescing and comparisons
* ``weekly`` - weekly expense buckets for the bar chart
* ``budgets`` - budget limits and alerts
* ``months`` - calendar helpers for ``YYYY-MM`` keys
* ``table`` - sorting, totals and payloads of the transaction table
* ``export`` - CSV export
* ``storage`` - client-local key-value state
* ``api_client`` - HTTP client for the transaction service
* ``ui`` and ``visualization`` - Streamlit components and Plotly figures
* ``dashboard`` - the Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run finance_tracker/dashboard.py
```
"""

from .aggregation import aggregate, coalesce_summary, compare_summaries, percent_change
from .budgets import BudgetBook, evaluate
from .classification import classify, is_expense, is_income
from .models import BudgetAlert, Flow, MetricDelta, Severity, Summary, Transaction, WeekBucket
from .weekly import weekly_buckets

__all__ = [
    "aggregate",
    "coalesce_summary",
    "compare_summaries",
    "percent_change",
    "BudgetBook",
    "evaluate",
    "classify",
    "is_expense",
    "is_income",
    "BudgetAlert",
    "Flow",
    "MetricDelta",
    "Severity",
    "Summary",
    "Transaction",
    "WeekBucket",
    "weekly_buckets",
]
