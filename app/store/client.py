"""
app/store/client.py
-------------------
HTTP client for the external document store that owns cart entries
and orders.

Endpoints consumed:

    GET    /orders?sessionId=<id>     → [CartLineEntry]
    DELETE /orders                    {sessionId, _id}
    DELETE /orders/clear              {sessionId}
    POST   /place-order               order payload
    GET    /place-order               → [Order]
    DELETE /place-order/<orderId>

Each method makes exactly one request. Anything other than a 2xx reply
becomes FetchError carrying the server's `message` when the body is JSON
and has one, otherwise the generic fallback for that operation.
"""
import logging

import requests
from flask import current_app

from app.errors import FetchError

logger = logging.getLogger(__name__)


class StoreClient:

    def __init__(self, base_url: str, timeout: float = 10, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    # ── Cart entries ──────────────────────────────────────────────

    def list_cart_entries(self, session_id: str) -> list:
        return self._request(
            'GET', '/orders',
            fallback='Failed to fetch cart items.',
            params={'sessionId': session_id},
        )

    def delete_cart_entry(self, session_id: str, entry_id: str) -> None:
        self._request(
            'DELETE', '/orders',
            fallback='Failed to remove item from cart.',
            json={'sessionId': session_id, '_id': entry_id},
        )

    def clear_cart(self, session_id: str) -> None:
        self._request(
            'DELETE', '/orders/clear',
            fallback='Failed to clear the cart.',
            json={'sessionId': session_id},
        )

    # ── Orders ────────────────────────────────────────────────────

    def place_order(self, payload: dict):
        return self._request(
            'POST', '/place-order',
            fallback='Failed to place the order.',
            json=payload,
        )

    def list_orders(self) -> list:
        return self._request('GET', '/place-order', fallback='Failed to fetch orders')

    def delete_order(self, order_id: str) -> None:
        self._request(
            'DELETE', f'/place-order/{order_id}',
            fallback='Failed to delete order',
        )

    # ── Transport ─────────────────────────────────────────────────

    def _request(self, method, path, fallback, **kwargs):
        url = self.base_url + path
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning('Store %s %s failed: %s', method, path, e)
            raise FetchError(fallback) from e

        if not 200 <= resp.status_code < 300:
            message = _error_message(resp) or fallback
            logger.warning(
                'Store %s %s returned %d: %s', method, path, resp.status_code, message
            )
            raise FetchError(message, status=resp.status_code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            # Acknowledged without a JSON body
            return None


def _error_message(resp):
    """Return the `message` field of a JSON error body, if any."""
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get('message'):
        return str(body['message'])
    return None


def init_store(app):
    """Attach a StoreClient configured from app.config."""
    app.extensions['store'] = StoreClient(
        app.config['STORE_API_URL'],
        timeout=app.config['STORE_TIMEOUT'],
    )


def get_store():
    """The store bound to the current app."""
    return current_app.extensions['store']
