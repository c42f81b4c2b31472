"""HTTP client for the transaction service.

The service exposes ``/tx`` with list, create, delete, monthly summary
and insight endpoints.  All calls are synchronous, use a fixed timeout
and are never retried; a failed call raises :class:`ApiError` except
for insights, which degrade to an empty narrative.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import requests

from . import config
from .logger import get_logger
from .models import Transaction

logger = get_logger(__name__)


class ApiError(Exception):
    """A request to the transaction service failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def unwrap_transactions(data: Any) -> List[Dict[str, Any]]:
    """Accept either a bare list or a ``{"content": [...]}`` page."""
    if isinstance(data, list):
        items = data
    elif isinstance(data, Mapping) and isinstance(data.get('content'), list):
        items = data['content']
    else:
        return []
    return [item for item in items if isinstance(item, Mapping)]


class TransactionClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or config.API_BASE_URL).rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self.headers = {
            'Accept': 'application/json',
            'Content-Type': 'application/json',
        }

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self._url(path)
        try:
            response = self.session.request(
                method, url, headers=self.headers, timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.warning("%s %s failed with HTTP %s", method, url, status)
            raise ApiError(f"HTTP {status}", status_code=status) from e
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(f"Request failed: {e}") from e
        return response

    def _json(self, response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON from {response.url}") from e

    def list_transactions(
        self,
        q: str = '',
        date_from: str = '',
        date_to: str = '',
        category: str = '',
    ) -> List[Dict[str, Any]]:
        """``GET /tx`` with the table filters; empty filters are sent as empty strings."""
        params = {'q': q or '', 'from': date_from or '', 'to': date_to or '', 'category': category or ''}
        response = self._request('GET', '/tx', params=params)
        return unwrap_transactions(self._json(response))

    def list_month(self, year_month: str) -> List[Dict[str, Any]]:
        """``GET /tx?month=YYYY-MM``."""
        response = self._request('GET', '/tx', params={'month': year_month})
        return unwrap_transactions(self._json(response))

    def get_summary(self, year_month: str) -> Dict[str, Any]:
        response = self._request('GET', '/tx/summary', params={'month': year_month})
        data = self._json(response)
        return data if isinstance(data, dict) else {}

    def get_insight(self, year_month: str) -> str:
        """Free-text narrative for the month; ``''`` on any failure."""
        try:
            response = self._request('GET', '/tx/insights', params={'month': year_month})
            data = self._json(response)
        except ApiError as e:
            logger.debug("Insight unavailable for %s: %s", year_month, e)
            return ''
        if isinstance(data, Mapping) and isinstance(data.get('summary'), str):
            return data['summary']
        return ''

    def create(self, transaction: Transaction) -> Dict[str, Any]:
        response = self._request('POST', '/tx', json=transaction.to_payload())
        data = self._json(response)
        logger.info("Created transaction %s", data.get('id') if isinstance(data, Mapping) else None)
        return data if isinstance(data, dict) else {}

    def delete(self, tx_id: int) -> None:
        self._request('DELETE', f'/tx/{int(tx_id)}')
        logger.info("Deleted transaction %s", tx_id)

    def close(self) -> None:
        self.session.close()
