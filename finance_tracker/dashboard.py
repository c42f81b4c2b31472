"""Streamlit app for the Finance Tracker.

This module wires the UI components to the REST client, the core
helpers and client-local state.  Every rerun fetches what the page
needs, computes summaries synchronously on the in-memory lists and
renders; only preferences and budgets outlive the run.

To run the dashboard from the command line::

    streamlit run finance_tracker/dashboard.py

or use ``python run_dashboard.py`` from the project root.
"""

from __future__ import annotations

import os
import sys
from typing import Any, Dict, List, Mapping, Tuple

import streamlit as st

# Conditional imports to support execution both as part of a package
# and directly through ``streamlit run finance_tracker/dashboard.py``.
if __package__:
    from . import config
    from .aggregation import coalesce_summary, compare_summaries, total_expense
    from .api_client import ApiError, TransactionClient
    from .budgets import BudgetBook, evaluate
    from .export import export_filename, transactions_to_csv
    from .formatting import escape_dollar_for_markdown, format_currency
    from .logger import get_logger, setup_logging
    from .months import month_bounds, parse_month, previous_month
    from .storage import (
        JsonFileStore,
        KeyValueStore,
        MemoryStore,
        load_dark_mode,
        load_preferences,
        save_dark_mode,
        save_preferences,
    )
    from .table import duplicate_transaction, filters_for_week, shown_totals, sort_transactions, toggle_sort
    from .ui import TrackerUI
    from .weekly import weekly_buckets
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from finance_tracker import config  # type: ignore
    from finance_tracker.aggregation import coalesce_summary, compare_summaries, total_expense  # type: ignore
    from finance_tracker.api_client import ApiError, TransactionClient  # type: ignore
    from finance_tracker.budgets import BudgetBook, evaluate  # type: ignore
    from finance_tracker.export import export_filename, transactions_to_csv  # type: ignore
    from finance_tracker.formatting import escape_dollar_for_markdown, format_currency  # type: ignore
    from finance_tracker.logger import get_logger, setup_logging  # type: ignore
    from finance_tracker.months import month_bounds, parse_month, previous_month  # type: ignore
    from finance_tracker.storage import (  # type: ignore
        JsonFileStore,
        KeyValueStore,
        MemoryStore,
        load_dark_mode,
        load_preferences,
        save_dark_mode,
        save_preferences,
    )
    from finance_tracker.table import (  # type: ignore
        duplicate_transaction,
        filters_for_week,
        shown_totals,
        sort_transactions,
        toggle_sort,
    )
    from finance_tracker.ui import TrackerUI  # type: ignore
    from finance_tracker.weekly import weekly_buckets  # type: ignore

logger = get_logger(__name__)

FILTER_KEYS = ('q', 'from', 'to', 'category')


def initial_preferences(store: KeyValueStore, fallback_month: str) -> Dict[str, str]:
    """Saved preferences, with the month and its bounds filled in when missing."""
    prefs = load_preferences(store)
    if parse_month(prefs['month']) is None:
        prefs['month'] = fallback_month
    if not prefs['from'] and not prefs['to']:
        bounds = month_bounds(prefs['month'])
        if bounds:
            prefs['from'], prefs['to'] = bounds
    return prefs


def change_month(prefs: Mapping[str, str], new_month: str) -> Dict[str, str]:
    """Switch to ``new_month``: the date filter snaps to the whole month."""
    updated = dict(prefs)
    bounds = month_bounds(new_month)
    if bounds is None:
        return updated
    updated['month'] = new_month
    updated['from'], updated['to'] = bounds
    return updated


def cleared_filters(prefs: Mapping[str, str]) -> Dict[str, str]:
    updated = dict(prefs)
    for key in FILTER_KEYS:
        updated[key] = ''
    return updated


def load_items(client: TransactionClient, prefs: Mapping[str, str]) -> List[Dict[str, Any]]:
    """Table rows for the current filters; :class:`ApiError` propagates."""
    return client.list_transactions(
        q=prefs.get('q', ''),
        date_from=prefs.get('from', ''),
        date_to=prefs.get('to', ''),
        category=prefs.get('category', ''),
    )


def load_month_transactions(client: TransactionClient, year_month: str) -> List[Dict[str, Any]]:
    """Unfiltered records of the month for the weekly chart."""
    bounds = month_bounds(year_month)
    if bounds is None:
        return []
    return client.list_transactions(date_from=bounds[0], date_to=bounds[1])


def load_budget_transactions(
    client: TransactionClient, year_month: str
) -> Tuple[List[Dict[str, Any]], str]:
    """Records for budget alerts and a one-line error (empty on success).

    A failed fetch counts as a month without transactions.
    """
    try:
        return client.list_month(year_month), ''
    except ApiError as e:
        logger.warning("Budget transactions unavailable for %s: %s", year_month, e)
        return [], str(e) or "Failed to load transactions"


def compute_summary_view(
    client: TransactionClient,
    year_month: str,
    month_transactions: List[Dict[str, Any]],
) -> Dict[str, Any]:
    """Summary, previous-month comparison and insight for ``year_month``.

    The current summary request propagates :class:`ApiError`; the
    previous month and the insight are optional and degrade to absent.
    """
    summary = coalesce_summary(client.get_summary(year_month), month_transactions)

    prev_month = previous_month(year_month)
    deltas = None
    if prev_month:
        try:
            previous = coalesce_summary(client.get_summary(prev_month), [])
        except ApiError as e:
            logger.info("No comparison for %s: %s", prev_month, e)
        else:
            deltas = compare_summaries(summary, previous)

    return {
        'month': year_month,
        'summary': summary,
        'deltas': deltas,
        'previous_month': prev_month,
        'insight': client.get_insight(year_month),
    }


def _get_store() -> KeyValueStore:
    store = st.session_state.get('_client_store')
    if store is None:
        try:
            config.ensure_data_directories()
            store = JsonFileStore(config.STATE_PATH)
        except OSError as e:
            logger.warning("Client state kept in memory only: %s", e)
            store = MemoryStore()
        st.session_state['_client_store'] = store
    return store


def _get_client() -> TransactionClient:
    client = st.session_state.get('_api_client')
    if client is None:
        client = TransactionClient()
        st.session_state['_api_client'] = client
    return client


def _ensure_state(store: KeyValueStore) -> None:
    if 'prefs' not in st.session_state:
        st.session_state['prefs'] = initial_preferences(store, config.default_month())
    st.session_state.setdefault('selected_week', None)
    st.session_state.setdefault('sort_key', 'date')
    st.session_state.setdefault('sort_dir', 'desc')
    st.session_state.setdefault('summary_view', None)
    if 'dark' not in st.session_state:
        st.session_state['dark'] = load_dark_mode(store)


def _set_prefs(store: KeyValueStore, prefs: Dict[str, str]) -> None:
    if prefs != st.session_state.get('prefs'):
        st.session_state['prefs'] = prefs
        save_preferences(store, prefs)


def _render_month_picker(store: KeyValueStore) -> str:
    prefs = st.session_state['prefs']
    st.sidebar.header("Month")
    entered = st.sidebar.text_input("Month (YYYY-MM)", value=prefs['month']).strip()
    if entered != prefs['month']:
        if parse_month(entered) is None:
            st.sidebar.error("Use the YYYY-MM format, e.g. 2025-09.")
        else:
            _set_prefs(store, change_month(prefs, entered))
            st.session_state['selected_week'] = None
    return st.session_state['prefs']['month']


def main() -> None:
    """Entry point for the Streamlit app."""
    if not st.session_state.get('_logging_configured'):
        setup_logging()
        st.session_state['_logging_configured'] = True

    ui = TrackerUI()
    ui.setup_page_config()
    store = _get_store()
    client = _get_client()
    _ensure_state(store)

    if ui.render_header(st.session_state['dark']):
        st.session_state['dark'] = not st.session_state['dark']
        save_dark_mode(store, st.session_state['dark'])
    ui.apply_dark_mode(st.session_state['dark'])

    month = _render_month_picker(store)

    # Add transaction
    new_tx = ui.render_add_transaction_form()
    if new_tx is not None:
        try:
            client.create(new_tx)
            st.toast("Transaction added")
        except ApiError as e:
            st.error(f"Could not add transaction: {e}")

    # Monthly summary, comparison and weekly chart
    try:
        month_tx = load_month_transactions(client, month)
    except ApiError as e:
        st.error(f"Could not load {month}: {e}")
        month_tx = []

    view = st.session_state.get('summary_view')
    if view is not None and view.get('month') != month:
        view = None
    compute = ui.render_summary(
        month,
        view['summary'] if view else None,
        view['deltas'] if view else None,
        view['previous_month'] if view else previous_month(month),
        view['insight'] if view else '',
    )
    if compute:
        try:
            st.session_state['summary_view'] = compute_summary_view(client, month, month_tx)
        except ApiError as e:
            st.error(f"Could not load the summary: {e}")
        else:
            st.rerun()

    buckets = weekly_buckets(month_tx, month)
    clicked_week = ui.render_weekly_chart(buckets, st.session_state['selected_week'])
    if clicked_week is not None:
        bounds = month_bounds(month)
        selected, date_filter = filters_for_week(
            bounds,
            st.session_state['selected_week'],
            clicked_week,
            [(bucket.start_date, bucket.end_date) for bucket in buckets],
        )
        st.session_state['selected_week'] = selected
        _set_prefs(store, {**st.session_state['prefs'], **date_filter})

    # Transactions table
    filters = ui.render_filters(st.session_state['prefs'])
    if filters['cleared']:
        _set_prefs(store, cleared_filters(st.session_state['prefs']))
        st.session_state['selected_week'] = None
        st.toast("Filters cleared")
    elif filters['applied']:
        _set_prefs(store, {**st.session_state['prefs'], **{key: filters[key] for key in FILTER_KEYS}})

    try:
        items = load_items(client, st.session_state['prefs'])
    except ApiError as e:
        st.error(f"Could not load transactions: {e}")
        items = []

    clicked_sort = ui.render_sort_controls(st.session_state['sort_key'], st.session_state['sort_dir'])
    if clicked_sort:
        st.session_state['sort_key'], st.session_state['sort_dir'] = toggle_sort(
            st.session_state['sort_key'], st.session_state['sort_dir'], clicked_sort
        )
    rows = sort_transactions(items, st.session_state['sort_key'], st.session_state['sort_dir'])
    ui.render_table(rows, shown_totals(rows))

    action = ui.render_row_actions(rows)
    if action['duplicate'] is not None or action['delete'] is not None:
        try:
            if action['duplicate'] is not None:
                client.create(duplicate_transaction(action['duplicate']))
                st.toast("Transaction duplicated")
            else:
                client.delete(action['delete'])
                st.toast("Transaction deleted")
        except ApiError as e:
            st.error(f"Could not update transactions: {e}")
        else:
            st.rerun()

    ui.render_export(transactions_to_csv(rows), export_filename(month))

    # Budgets
    book = BudgetBook(store)
    budget_input = ui.render_budget_form()
    if budget_input is not None:
        try:
            name = book.set(budget_input['category'], budget_input['limit'])
            st.success(escape_dollar_for_markdown(f"Saved: {name} → {format_currency(book.budgets[name])}"))
        except ValueError as e:
            st.warning(str(e))
    removed = ui.render_saved_budgets(book.budgets)
    if removed is not None and book.remove(removed):
        st.rerun()

    budget_tx, load_err = load_budget_transactions(client, month)
    ui.render_budget_alerts(evaluate(book.budgets, budget_tx, month))
    if load_err:
        st.caption(f"⚠ {load_err}")
    st.caption(escape_dollar_for_markdown(
        f"This month: {format_currency(total_expense(budget_tx))} in expenses across {len(budget_tx)} transactions."
    ))


if __name__ == "__main__":  # pragma: no cover
    main()
