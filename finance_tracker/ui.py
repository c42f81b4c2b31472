"""Streamlit UI components for the finance tracker.

Each ``render_*`` method draws one section of the page and returns the
user's action (a payload, a clicked index, ...) instead of acting on it,
so the dashboard module stays the single place that talks to the REST
service and to client-local state.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

import streamlit as st
from streamlit.errors import StreamlitAPIException

from .formatting import escape_dollar_for_markdown, format_currency, format_percent_change
from .models import CATEGORIES, BudgetAlert, MetricDelta, Severity, Summary, Transaction, WeekBucket, amount_of
from .months import month_label
from .table import SORT_KEYS, form_transaction, sort_icon, transactions_frame
from .visualization import create_budget_progress_chart, create_category_bar_chart, create_weekly_expense_chart

SEVERITY_BADGES = {
    Severity.NORMAL: '🟢',
    Severity.WARNING: '🟠',
    Severity.CRITICAL: '🔴',
}
PACE_TEXT = {
    'over': 'Over pace',
    'under': 'Under pace',
    'on': 'On pace',
}


class TrackerUI:
    """UI components for the finance tracker page."""
    _PAGE_CONFIGURED = False

    def setup_page_config(self) -> None:
        if TrackerUI._PAGE_CONFIGURED:
            return
        try:
            st.set_page_config(
                page_title="Finance Tracker",
                page_icon="💰",
                layout="wide",
                initial_sidebar_state="expanded",
            )
        except StreamlitAPIException:
            # Already configured upstream; avoid raising to keep reruns smooth.
            pass
        finally:
            TrackerUI._PAGE_CONFIGURED = True

    def render_header(self, dark: bool) -> bool:
        """Title row; returns True when the dark-mode toggle was clicked."""
        col1, col2 = st.columns([4, 1])
        with col1:
            st.title("💰 Finance Tracker")
        with col2:
            label = "☀️ Light Mode" if dark else "🌙 Dark Mode"
            return st.button(label, help="Toggle dark mode")

    def apply_dark_mode(self, enabled: bool) -> None:
        if not enabled:
            return
        st.markdown("""
        <style>
        .stApp {
            background-color: #0f172a;
            color: #e2e8f0;
        }
        .stMetric {
            background-color: #1e293b;
            padding: 1rem;
            border-radius: 0.5rem;
        }
        </style>
        """, unsafe_allow_html=True)

    def render_add_transaction_form(self) -> Optional[Transaction]:
        """Form for a new transaction; returns the payload when submitted."""
        st.subheader("➕ Add Transaction")
        with st.form("add_transaction_form", clear_on_submit=True):
            col1, col2, col3 = st.columns(3)
            with col1:
                tx_date = st.date_input("Date", value=date.today())
                merchant = st.text_input("Merchant")
            with col2:
                amount = st.number_input("Amount", min_value=0.0, step=0.01)
                kind = st.radio("Kind", options=["expense", "income"], horizontal=True)
            with col3:
                category = st.selectbox("Category", options=list(CATEGORIES))
                notes = st.text_input("Notes (optional)")
            submitted = st.form_submit_button("Add Transaction")

        if not submitted:
            return None
        return form_transaction(kind, amount, tx_date, merchant, category, notes)

    def render_summary(
        self,
        year_month: str,
        summary: Optional[Summary],
        deltas: Optional[Sequence[MetricDelta]],
        previous_month: str,
        insight: str,
    ) -> bool:
        """Monthly summary panel; returns True when "Compute" was clicked."""
        st.subheader(f"📊 Summary for {month_label(year_month)}")
        compute = st.button("Compute summary", key="compute_summary")
        if summary is None:
            st.caption("Click compute to load the monthly summary.")
            return compute

        cols = st.columns(4)
        cols[0].metric("Income", format_currency(summary.income))
        cols[1].metric("Expense", format_currency(summary.expense))
        cols[2].metric("Net", format_currency(summary.net))
        cols[3].metric("Transactions", f"{summary.count}")

        if summary.per_category_expense:
            st.markdown("**Expense by category**")
            shares = summary.category_shares()
            for name, spent in sorted(summary.per_category_expense.items(), key=lambda item: -item[1]):
                pct = shares.get(name, 0)
                st.progress(min(100, max(0, pct)), text=escape_dollar_for_markdown(
                    f"{name}: {format_currency(spent)} ({pct}%)"
                ))
            st.plotly_chart(create_category_bar_chart(summary.per_category_expense), use_container_width=True)

        if deltas:
            st.markdown(f"**{month_label(previous_month)} → {month_label(year_month)}**")
            delta_cols = st.columns(len(deltas))
            for col, delta in zip(delta_cols, deltas):
                arrow = '▲' if delta.delta > 0 else '▼' if delta.delta < 0 else '■'
                col.metric(
                    delta.metric.capitalize(),
                    format_currency(delta.current),
                    delta=f"{arrow} {format_currency(abs(delta.delta))} ({format_percent_change(delta.percent_change)})",
                    delta_color="inverse" if delta.metric == 'expense' else "normal",
                )

        if insight:
            st.info(insight)
        return compute

    def render_weekly_chart(self, buckets: Sequence[WeekBucket], selected: Optional[int]) -> Optional[int]:
        """Weekly expense bars; returns the index of a clicked week button."""
        if not buckets:
            return None
        st.plotly_chart(create_weekly_expense_chart(buckets, selected), use_container_width=True)
        st.caption("Click a week to filter the table; click it again to show the whole month.")
        clicked: Optional[int] = None
        cols = st.columns(len(buckets))
        for idx, (col, bucket) in enumerate(zip(cols, buckets)):
            label = f"✔ {bucket.short_label}" if idx == selected else bucket.short_label
            if col.button(label, key=f"week_{idx}", help=bucket.label):
                clicked = idx
        return clicked

    def render_filters(self, defaults: Mapping[str, str]) -> Dict[str, Any]:
        """Filter bar; returns the edited values and which button was pressed."""
        st.subheader("🔎 Transactions")
        with st.form("filters_form"):
            cols = st.columns([3, 2, 2, 2])
            q = cols[0].text_input("Search merchant/category/notes", value=defaults.get('q', ''))
            date_from = cols[1].text_input("From (YYYY-MM-DD)", value=defaults.get('from', ''))
            date_to = cols[2].text_input("To (YYYY-MM-DD)", value=defaults.get('to', ''))
            options = [''] + list(CATEGORIES)
            current = defaults.get('category', '')
            if current not in options:
                options.append(current)
            category = cols[3].selectbox(
                "Category",
                options=options,
                index=options.index(current),
                format_func=lambda value: value or "All categories",
            )
            apply_col, clear_col = st.columns([1, 1])
            applied = apply_col.form_submit_button("Apply filters")
            cleared = clear_col.form_submit_button("Clear filters")
        return {
            'q': q.strip(),
            'from': date_from.strip(),
            'to': date_to.strip(),
            'category': category,
            'applied': applied,
            'cleared': cleared,
        }

    def render_sort_controls(self, sort_key: str, sort_dir: str) -> Optional[str]:
        """Column header buttons; returns the clicked column."""
        clicked: Optional[str] = None
        cols = st.columns(len(SORT_KEYS))
        for col, key in zip(cols, SORT_KEYS):
            if col.button(f"{key.capitalize()} {sort_icon(key, sort_key, sort_dir)}", key=f"sort_{key}"):
                clicked = key
        return clicked

    def render_table(self, items: Sequence[Mapping[str, Any]], totals: Summary) -> None:
        if not items:
            st.info("No transactions.")
            return
        frame = transactions_frame(items)
        st.dataframe(
            frame.style.format({'amount': '${:,.2f}'}),
            use_container_width=True,
            hide_index=True,
        )
        cols = st.columns(4)
        cols[0].metric("Expense (shown)", format_currency(totals.expense))
        cols[1].metric("Income (shown)", format_currency(totals.income))
        cols[2].metric("Net (shown)", format_currency(totals.net))
        cols[3].metric("Rows", f"{totals.count}")

    def render_row_actions(self, items: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        """Delete/duplicate controls for a chosen row."""
        action: Dict[str, Any] = {'delete': None, 'duplicate': None}
        if not items:
            return action
        labels = [
            f"{tx.get('date', '')} · {tx.get('merchant', '')} · {format_currency(abs(amount_of(tx)))}"
            for tx in items
        ]
        with st.expander("Row actions"):
            idx = st.selectbox("Transaction", options=list(range(len(items))), format_func=lambda i: labels[i])
            col1, col2 = st.columns(2)
            if col1.button("Duplicate", key="duplicate_row"):
                action['duplicate'] = items[idx]
            tx_id = items[idx].get('id')
            if isinstance(tx_id, int) and col2.button("Delete", key="delete_row"):
                action['delete'] = tx_id
        return action

    def render_export(self, csv_text: str, filename: str) -> None:
        st.download_button(
            "⬇️ Export CSV",
            data=csv_text.encode('utf-8'),
            file_name=filename,
            mime="text/csv",
        )

    def render_budget_form(self) -> Optional[Dict[str, Any]]:
        st.subheader("📋 Budgets")
        with st.form("budget_form", clear_on_submit=True):
            col1, col2 = st.columns(2)
            category = col1.selectbox(
                "Category",
                options=[''] + list(CATEGORIES),
                format_func=lambda value: value or "Select category…",
            )
            limit = col2.number_input("Monthly limit (USD)", min_value=0.0, step=10.0)
            submitted = st.form_submit_button("Add / Update")
        if not submitted:
            return None
        return {'category': category, 'limit': limit}

    def render_saved_budgets(self, budgets: Mapping[str, float]) -> Optional[str]:
        """Saved limits with remove buttons; returns the category to remove."""
        st.markdown("**Saved Budgets**")
        if not budgets:
            st.caption("None yet.")
            return None
        removed: Optional[str] = None
        for name, limit in budgets.items():
            col1, col2 = st.columns([5, 1])
            col1.markdown(escape_dollar_for_markdown(f"**{name}**: {format_currency(limit)}"))
            if col2.button("✕", key=f"remove_budget_{name}", help="Remove"):
                removed = name
        return removed

    def render_budget_alerts(self, alerts: List[BudgetAlert]) -> None:
        st.markdown("**Budget Alerts**")
        if not alerts:
            st.caption("No budgets to track yet.")
            return
        for alert in alerts:
            badge = SEVERITY_BADGES[alert.severity]
            headline = (
                f"{badge} **{alert.category}** "
                f"{format_currency(alert.spent)} / {format_currency(alert.limit)} ({alert.percent}%)"
            )
            st.markdown(escape_dollar_for_markdown(headline))
            st.progress(alert.percent)
            if alert.delta > 0:
                where = f"{format_currency(alert.delta)} over"
            elif alert.delta < 0:
                where = f"{format_currency(abs(alert.delta))} under"
            else:
                where = "on track"
            st.caption(escape_dollar_for_markdown(
                f"{PACE_TEXT[alert.pace]}: should be ≤ {format_currency(alert.expected)}; you are {where}."
            ))
        st.plotly_chart(create_budget_progress_chart(alerts), use_container_width=True)
