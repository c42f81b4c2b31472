from datetime import date

import pytest

from finance_tracker.budgets import BudgetBook, evaluate, severity_for, spend_by_category
from finance_tracker.models import Severity
from finance_tracker.storage import BUDGETS_KEY, MemoryStore

PAST_TODAY = date(2030, 1, 1)


def _alert(limit, spent, today=PAST_TODAY):
    rows = [{'amount': spent, 'category': 'Food'}] if spent else []
    return evaluate({'Food': limit}, rows, '2025-09', today=today)[0]


def test_severity_thresholds():
    assert _alert(100, 80).severity is Severity.WARNING
    assert _alert(100, 100).severity is Severity.CRITICAL
    assert _alert(100, 79.99).severity is Severity.NORMAL
    assert _alert(100, 0).severity is Severity.NORMAL
    assert severity_for(1.5) is Severity.CRITICAL


def test_ratio_and_percent_are_reported():
    alert = _alert(200, 250)
    assert alert.spent == 250
    assert alert.ratio == 1.25
    assert alert.percent == 100


def test_spend_matches_normalized_category_and_ignores_income():
    rows = [
        {'amount': 30, 'category': ' food '},
        {'amount': 20, 'category': 'FOOD'},
        {'amount': -40, 'category': 'Food'},
        {'amount': 10, 'category': 'Rent'},
    ]
    alert = evaluate({'Food': 100}, rows, '2025-09', today=PAST_TODAY)[0]
    assert alert.spent == 50
    assert spend_by_category(rows) == {'food': 50, 'rent': 10}


def test_alerts_sorted_by_ratio_descending():
    rows = [
        {'amount': 10, 'category': 'Food'},
        {'amount': 90, 'category': 'Rent'},
        {'amount': 50, 'category': 'Fun'},
    ]
    alerts = evaluate({'Food': 100, 'Rent': 100, 'Fun': 100}, rows, '2025-09', today=PAST_TODAY)
    assert [a.category for a in alerts] == ['Rent', 'Fun', 'Food']


def test_pacing_for_past_month_uses_full_limit():
    alert = _alert(300, 100, today=date(2025, 10, 5))
    assert alert.expected == 300
    assert alert.delta == -200
    assert alert.pace == 'under'


def test_pacing_for_current_month_is_prorated():
    alert = _alert(300, 100, today=date(2025, 9, 10))
    assert alert.expected == pytest.approx(100)
    assert alert.pace == 'on'


def test_pacing_for_future_month_expects_nothing():
    alert = _alert(300, 100, today=date(2025, 8, 31))
    assert alert.expected == 0
    assert alert.delta == 100
    assert alert.pace == 'over'
    # pacing never changes severity
    assert alert.severity is Severity.NORMAL


def test_no_transactions_still_produces_alerts():
    alerts = evaluate({'Food': 100}, [], '2025-09', today=PAST_TODAY)
    assert len(alerts) == 1
    assert alerts[0].spent == 0


def test_budget_book_replaces_case_insensitive_duplicates():
    store = MemoryStore({BUDGETS_KEY: {'Food': 100.0}})
    book = BudgetBook(store)
    stored_as = book.set('food', 250)
    assert stored_as == 'food'
    assert book.budgets == {'food': 250.0}
    assert store.get(BUDGETS_KEY) == {'food': 250.0}


def test_budget_book_trims_and_matches_whitespace():
    book = BudgetBook(MemoryStore())
    book.set('  Rent ', 900)
    book.set('RENT', 950)
    assert book.budgets == {'RENT': 950.0}
    assert 'rent' in book
    assert len(book) == 1


@pytest.mark.parametrize('category, limit', [('', 10), ('   ', 10), ('Food', 0), ('Food', -5), ('Food', 'abc'), ('Food', float('inf'))])
def test_budget_book_rejects_invalid_input(category, limit):
    book = BudgetBook(MemoryStore())
    with pytest.raises(ValueError):
        book.set(category, limit)
    assert book.budgets == {}


def test_budget_book_remove_is_normalized():
    store = MemoryStore()
    book = BudgetBook(store)
    book.set('Food', 100)
    book.set('Rent', 900)
    assert book.remove(' FOOD ')
    assert not book.remove('Food')
    assert store.get(BUDGETS_KEY) == {'Rent': 900.0}


def test_budget_book_skips_invalid_stored_entries():
    store = MemoryStore({BUDGETS_KEY: {'Food': '120', 'Bad': 'x', 'Zero': 0, 'Neg': -1}})
    assert BudgetBook(store).budgets == {'Food': 120.0}


def test_budget_book_survives_non_mapping_blob():
    assert BudgetBook(MemoryStore({BUDGETS_KEY: ['Food']})).budgets == {}
