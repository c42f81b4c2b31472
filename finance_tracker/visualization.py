"""Plotly visualisation helpers for the finance tracker.

Each function accepts the result objects produced by the core helpers
(:mod:`weekly`, :mod:`aggregation`, :mod:`budgets`) and returns a
``plotly.graph_objects.Figure`` that Streamlit renders with
``st.plotly_chart``.  Empty inputs produce an empty figure titled
"No data to display" rather than raising.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .models import BudgetAlert, Severity, WeekBucket

PRIMARY_COLOR = '#10b981'
PRIMARY_DARK_COLOR = '#047857'
SEVERITY_COLORS = {
    Severity.NORMAL: PRIMARY_COLOR,
    Severity.WARNING: '#f59e0b',
    Severity.CRITICAL: '#ef4444',
}


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_weekly_expense_chart(
    buckets: Sequence[WeekBucket],
    selected: Optional[int] = None,
    title: str | None = None,
) -> go.Figure:
    """Bar chart of expense per week of the month.

    Parameters
    ----------
    buckets : sequence of WeekBucket
        Output of :func:`finance_tracker.weekly.weekly_buckets`.
    selected : int, optional
        Index of the highlighted week, drawn in the darker colour.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar chart with one bar per week; the hover text carries the full
        ``W<n> (<start>–<end>)`` label.
    """
    if not buckets:
        return _empty_figure()
    totals = np.array([bucket.total_expense for bucket in buckets], dtype=float)
    colors = [
        PRIMARY_DARK_COLOR if idx == selected else PRIMARY_COLOR
        for idx in range(len(buckets))
    ]
    fig = go.Figure(
        go.Bar(
            x=[bucket.short_label for bucket in buckets],
            y=totals,
            marker_color=colors,
            hovertext=[bucket.label for bucket in buckets],
            hovertemplate="%{hovertext}<br>$%{y:,.2f}<extra></extra>",
        )
    )
    fig.update_layout(
        title=title or "Weekly expenses",
        xaxis_title="Week",
        yaxis_title="Expense",
        yaxis_range=[0, max(1.0, float(totals.max()) * 1.1)],
        height=260,
        margin=dict(l=40, r=10, t=40, b=30),
    )
    return fig


def create_category_bar_chart(per_category: Mapping[str, float], title: str | None = None) -> go.Figure:
    """Horizontal bar chart of expense per category, largest on top."""
    if not per_category:
        return _empty_figure()
    df = pd.DataFrame(list(per_category.items()), columns=["Category", "Expense"])
    df = df.sort_values("Expense", ascending=True)
    fig = px.bar(df, x="Expense", y="Category", orientation="h")
    fig.update_traces(marker_color=PRIMARY_COLOR)
    fig.update_layout(
        title=title or "Expense by category",
        xaxis_title="Expense",
        yaxis_title="",
        height=max(220, 40 * len(df) + 80),
    )
    return fig


def create_budget_progress_chart(alerts: Sequence[BudgetAlert], title: str | None = None) -> go.Figure:
    """Spent vs limit per budget, coloured by severity."""
    if not alerts:
        return _empty_figure("No budgets to display")
    categories = [alert.category for alert in alerts]
    fig = go.Figure()
    fig.add_trace(go.Bar(
        name='Limit',
        x=categories,
        y=[alert.limit for alert in alerts],
        marker_color='#cbd5e1',
    ))
    fig.add_trace(go.Bar(
        name='Spent',
        x=categories,
        y=[alert.spent for alert in alerts],
        marker_color=[SEVERITY_COLORS[alert.severity] for alert in alerts],
    ))
    fig.update_layout(title=title or "Budget vs spent", barmode='group', xaxis_tickangle=-30)
    return fig
