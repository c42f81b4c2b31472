import json

import pytest
import requests

from finance_tracker.api_client import ApiError, TransactionClient, unwrap_transactions
from finance_tracker.models import Transaction


class _FakeResponse:
    def __init__(self, payload=None, status_code=200, raw=None):
        self.status_code = status_code
        self.url = 'http://api.test/tx'
        if raw is not None:
            self.content = raw.encode('utf-8')
        elif payload is None:
            self.content = b''
        else:
            self.content = json.dumps(payload).encode('utf-8')

    def json(self):
        return json.loads(self.content.decode('utf-8'))

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class _FakeSession:
    def __init__(self, *responses, error=None):
        self.responses = list(responses)
        self.error = error
        self.calls = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)

    def close(self):
        self.closed = True


def _client(session):
    return TransactionClient(base_url='http://api.test/', session=session, timeout=3)


def test_list_transactions_sends_all_filters():
    session = _FakeSession(_FakeResponse([{'id': 1, 'amount': 5}]))
    items = _client(session).list_transactions(q='cafe', date_from='2025-09-01')
    method, url, kwargs = session.calls[0]
    assert (method, url) == ('GET', 'http://api.test/tx')
    assert kwargs['params'] == {'q': 'cafe', 'from': '2025-09-01', 'to': '', 'category': ''}
    assert kwargs['timeout'] == 3
    assert items == [{'id': 1, 'amount': 5}]


def test_list_month_accepts_paged_content():
    session = _FakeSession(_FakeResponse({'content': [{'id': 1}, 'junk', {'id': 2}]}))
    items = _client(session).list_month('2025-09')
    assert session.calls[0][2]['params'] == {'month': '2025-09'}
    assert items == [{'id': 1}, {'id': 2}]


def test_unwrap_transactions_rejects_other_shapes():
    assert unwrap_transactions({'items': []}) == []
    assert unwrap_transactions(None) == []
    assert unwrap_transactions('text') == []


def test_http_error_raises_api_error():
    session = _FakeSession(_FakeResponse({'error': 'boom'}, status_code=500))
    with pytest.raises(ApiError) as excinfo:
        _client(session).list_transactions()
    assert excinfo.value.status_code == 500
    assert str(excinfo.value) == 'HTTP 500'


def test_network_error_raises_api_error():
    session = _FakeSession(error=requests.ConnectionError('refused'))
    with pytest.raises(ApiError) as excinfo:
        _client(session).get_summary('2025-09')
    assert excinfo.value.status_code is None


def test_invalid_json_raises_api_error():
    session = _FakeSession(_FakeResponse(raw='<html>'))
    with pytest.raises(ApiError):
        _client(session).list_transactions()


def test_get_summary_returns_mapping_or_empty():
    session = _FakeSession(_FakeResponse({'totalIncome': 10}), _FakeResponse([1, 2]))
    client = _client(session)
    assert client.get_summary('2025-09') == {'totalIncome': 10}
    assert client.get_summary('2025-08') == {}
    assert session.calls[0][1] == 'http://api.test/tx/summary'


def test_insight_degrades_to_empty_text():
    client = _client(_FakeSession(_FakeResponse({'summary': 'You spent less on food.'})))
    assert client.get_insight('2025-09') == 'You spent less on food.'
    assert _client(_FakeSession(_FakeResponse(status_code=503))).get_insight('2025-09') == ''
    assert _client(_FakeSession(_FakeResponse({'text': 'x'}))).get_insight('2025-09') == ''
    assert _client(_FakeSession(error=requests.Timeout())).get_insight('2025-09') == ''


def test_create_posts_payload_without_id():
    session = _FakeSession(_FakeResponse({'id': 42}))
    tx = Transaction(date='2025-09-01', merchant='Cafe', amount=4.5, category='Food', notes=None, id=7)
    created = _client(session).create(tx)
    method, url, kwargs = session.calls[0]
    assert (method, url) == ('POST', 'http://api.test/tx')
    assert kwargs['json'] == {'date': '2025-09-01', 'merchant': 'Cafe', 'amount': 4.5,
                              'category': 'Food', 'notes': ''}
    assert created == {'id': 42}


def test_delete_targets_transaction_path():
    session = _FakeSession(_FakeResponse())
    client = _client(session)
    client.delete(7)
    assert session.calls[0][:2] == ('DELETE', 'http://api.test/tx/7')
    client.close()
    assert session.closed
