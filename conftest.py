"""
Shared fixtures: the testing app with an in-memory document store.
Run: pytest -v
"""
import itertools
from datetime import datetime, timezone

import pytest

from app import create_app
from app.errors import FetchError


class FakeStore:
    """
    Stands in for StoreClient. Records every call as (method, args) and
    raises FetchError for any operation named in `failures`.
    """

    def __init__(self):
        self.cart = {}          # session_id → [entry docs]
        self.orders = []        # order docs, store (insertion) order
        self.calls = []
        self.failures = {}      # method name → message
        self._ids = itertools.count(1)

    # helpers
    def add_entry(self, session_id, name, price, quantity=1, **extra):
        doc = {
            '_id': f'e{next(self._ids)}', 'sessionId': session_id,
            'name': name, 'price': price, 'quantity': quantity,
            'cuisine': 'indian', 'section': 'mains', 'image': '',
        }
        doc.update(extra)
        self.cart.setdefault(session_id, []).append(doc)
        return doc

    def add_order(self, order_id, order_date, name='Guest', grand_total=105.0):
        doc = {
            '_id': order_id, 'sessionId': 's', 'serialNumber': order_id.upper(),
            'customer': {'name': name, 'contact': '999', 'address': 'Street 1'},
            'paymentMethod': 'Cash', 'items': [], 'subtotal': 100.0,
            'gstAmount': 5.0, 'grandTotal': grand_total, 'orderDate': order_date,
        }
        self.orders.append(doc)
        return doc

    def count(self, method):
        return sum(1 for m, _ in self.calls if m == method)

    def _call(self, method, *args):
        self.calls.append((method, args))
        if method in self.failures:
            raise FetchError(self.failures[method])

    # StoreClient interface
    def list_cart_entries(self, session_id):
        self._call('list_cart_entries', session_id)
        return [dict(d) for d in self.cart.get(session_id, [])]

    def delete_cart_entry(self, session_id, entry_id):
        self._call('delete_cart_entry', session_id, entry_id)
        self.cart[session_id] = [
            d for d in self.cart.get(session_id, []) if d['_id'] != entry_id
        ]

    def clear_cart(self, session_id):
        self._call('clear_cart', session_id)
        self.cart.pop(session_id, None)

    def place_order(self, payload):
        self._call('place_order', payload)
        doc = {
            '_id': f'o{next(self._ids)}',
            'serialNumber': str(len(self.orders) + 1),
            'orderDate': datetime.now(timezone.utc).isoformat(),
            'customer': {
                'name': payload['name'],
                'contact': payload['contact'],
                'address': payload['address'],
            },
            **{k: v for k, v in payload.items() if k not in ('name', 'contact', 'address')},
        }
        self.orders.append(doc)
        return {'message': 'Order placed', 'order': doc}

    def list_orders(self):
        self._call('list_orders')
        return [dict(d) for d in self.orders]

    def delete_order(self, order_id):
        self._call('delete_order', order_id)
        self.orders = [d for d in self.orders if d['_id'] != order_id]


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def app(store):
    app = create_app('testing')
    app.extensions['store'] = store
    return app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


def session_id_of(client):
    """Token the test client's cookie currently carries."""
    with client.session_transaction() as sess:
        return sess.get('sessionId')
