from datetime import date

from finance_tracker.months import (
    day_of_month,
    days_elapsed,
    days_in_month,
    month_bounds,
    month_label,
    parse_month,
    previous_month,
)


def test_parse_month():
    assert parse_month('2025-09') == (2025, 9)
    assert parse_month(' 2025-9 ') == (2025, 9)
    for bad in (None, '', '2025', '2025-13', '2025-00', 'abcd-ef', '2025-09-01'):
        assert parse_month(bad) is None


def test_days_in_month_handles_leap_years():
    assert days_in_month('2024-02') == 29
    assert days_in_month('2023-02') == 28
    assert days_in_month('1900-02') == 28
    assert days_in_month('2025-09') == 30
    assert days_in_month('bad') == 0


def test_month_bounds():
    assert month_bounds('2024-02') == ('2024-02-01', '2024-02-29')
    assert month_bounds('2025-12') == ('2025-12-01', '2025-12-31')
    assert month_bounds('nope') is None


def test_previous_month_wraps_year():
    assert previous_month('2025-01') == '2024-12'
    assert previous_month('2025-09') == '2025-08'
    assert previous_month('') == ''


def test_month_label():
    assert month_label('2025-09') == 'Sep 2025'
    assert month_label('junk') == 'junk'


def test_days_elapsed():
    assert days_elapsed('2025-09', today=date(2025, 10, 1)) == 30
    assert days_elapsed('2025-09', today=date(2025, 9, 12)) == 12
    assert days_elapsed('2025-09', today=date(2025, 8, 31)) == 0
    assert days_elapsed('bad', today=date(2025, 9, 12)) == 0


def test_day_of_month():
    assert day_of_month('2025-09-05', '2025-09') == 5
    assert day_of_month('2025-09-30T23:59:59Z', '2025-09') == 30
    assert day_of_month('2025-08-05', '2025-09') is None
    assert day_of_month('05/09/2025', '2025-09') is None
    assert day_of_month(20250905, '2025-09') is None
    assert day_of_month('2025-09-00', '2025-09') is None
