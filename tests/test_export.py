from finance_tracker.export import EXPORT_COLUMNS, export_filename, transactions_to_csv


def test_header_only_for_empty_list():
    assert transactions_to_csv([]) == 'id,date,merchant,amount,category,notes'
    assert EXPORT_COLUMNS[0] == 'id'


def test_plain_rows_are_unquoted():
    rows = [{'id': 1, 'date': '2025-09-01', 'merchant': 'Cafe', 'amount': 4.5, 'category': 'Food', 'notes': 'latte'}]
    lines = transactions_to_csv(rows).split('\n')
    assert lines[1] == '1,2025-09-01,Cafe,4.5,Food,latte'
    assert not transactions_to_csv(rows).endswith('\n')


def test_comma_and_quote_are_escaped():
    rows = [{'id': 2, 'date': '2025-09-02', 'merchant': 'Joe\'s "Diner"', 'amount': 12,
             'category': 'Food', 'notes': 'lunch, with team'}]
    line = transactions_to_csv(rows).split('\n')[1]
    assert line == '2,2025-09-02,"Joe\'s ""Diner""",12,Food,"lunch, with team"'


def test_missing_fields_are_empty():
    rows = [{'date': '2025-09-03', 'amount': -100, 'notes': None}]
    assert transactions_to_csv(rows).split('\n')[1] == ',2025-09-03,,-100,,'


def test_export_filename():
    assert export_filename('2025-09') == 'transactions_202509.csv'
    assert export_filename('') == 'transactions_all.csv'
    assert export_filename(None) == 'transactions_all.csv'
