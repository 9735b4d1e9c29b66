"""
test_checkout.py — Tests for the two-step checkout (place order, clear cart).
Run: pytest test_checkout.py -v
"""
import logging
from decimal import Decimal

import pytest

from app.cart.pricing import compute_totals
from app.cart.service import load_aggregated_cart
from app.errors import FetchError, PartialCheckoutInconsistency, ValidationError
from app.orders.checkout import submit_order, validate_checkout, validate_customer
from app.orders.models import Customer, Order

LABEL = 'Cash on Counter or UPI or Credit/Debit Card'
GUEST = Customer(name='Asha', contact='9876543210', address='12 MG Road')


@pytest.fixture
def cart(store):
    store.add_entry('s1', 'Paneer Tikka', 10, 2)
    store.add_entry('s1', 'Paneer Tikka', 10, 1)
    store.add_entry('s1', 'Lassi', 70, 1)
    items = load_aggregated_cart(store, 's1')
    store.calls.clear()
    return items


def place(store, items, customer=GUEST):
    totals = compute_totals(items, Decimal('0.05'))
    return submit_order(store, 's1', customer, items, totals, LABEL)


# ── Validation gate ───────────────────────────────────────────────

def test_empty_contact_is_rejected_without_network(store, cart):
    with pytest.raises(ValidationError) as exc:
        place(store, cart, Customer(name='Asha', contact='', address='12 MG Road'))
    assert exc.value.fields == ['contact']
    assert 'contact' in str(exc.value)
    assert store.calls == []


def test_whitespace_only_fields_count_as_missing(store, cart):
    with pytest.raises(ValidationError) as exc:
        place(store, cart, Customer(name='  ', contact='1', address='\t'))
    assert exc.value.fields == ['name', 'address']
    assert store.calls == []


def test_empty_cart_is_rejected(store):
    with pytest.raises(ValidationError) as exc:
        place(store, [])
    assert exc.value.fields == ['items']
    assert str(exc.value) == 'Your cart is empty.'
    assert store.calls == []


def test_validate_checkout_passes_for_complete_input(cart):
    assert validate_checkout(GUEST, cart) is None


def test_missing_fields_reported_before_empty_cart():
    with pytest.raises(ValidationError) as exc:
        validate_checkout(Customer(name='Asha'), [])
    assert exc.value.fields == ['contact', 'address']


def test_validate_customer_needs_no_cart():
    validate_customer(GUEST)
    with pytest.raises(ValidationError, match='Please fill out: name.'):
        validate_customer(Customer(contact='1', address='x'))


# ── Happy path ────────────────────────────────────────────────────

def test_order_placed_then_cart_cleared(store, cart):
    result = place(store, cart)

    assert [m for m, _ in store.calls] == ['place_order', 'clear_cart']
    assert result.cart_cleared is True
    assert result.inconsistency is None
    assert store.cart.get('s1') is None

    order = result.order
    assert order.id is not None
    assert order.serial_number == '1'
    assert order.customer == GUEST
    assert order.grand_total == Decimal('105.00')
    assert [(i.name, i.quantity) for i in order.items] == [('Paneer Tikka', 3), ('Lassi', 1)]


def test_payload_matches_store_contract(store, cart):
    place(store, cart, Customer(name=' Asha ', contact='98765 ', address='12 MG Road'))
    payload = store.calls[0][1][0]
    assert payload['sessionId'] == 's1'
    assert payload['name'] == 'Asha'
    assert payload['contact'] == '98765'
    assert payload['paymentMethod'] == LABEL
    assert payload['subtotal'] == 100.0
    assert payload['gstAmount'] == 5.0
    assert payload['grandTotal'] == 105.0
    assert payload['items'][0] == {
        '_id': 'e1', 'productId': None, 'name': 'Paneer Tikka',
        'cuisine': 'indian', 'section': 'mains', 'image': '',
        'price': 10.0, 'quantity': 3, 'totalPrice': 30.0,
    }


def test_acknowledgement_without_echo_returns_snapshot(store, cart, monkeypatch):
    monkeypatch.setattr(store, 'place_order', lambda payload: {'message': 'ok'})
    result = place(store, cart)
    assert result.order.id is None
    assert result.order.session_id == 's1'
    assert result.order.grand_total == Decimal('105.00')


# ── Failure ordering ──────────────────────────────────────────────

def test_failed_order_never_clears_cart(store, cart):
    store.failures['place_order'] = 'Store down'
    with pytest.raises(FetchError, match='Store down'):
        place(store, cart)
    assert store.count('clear_cart') == 0
    assert len(store.cart['s1']) == 3


def test_failed_clear_keeps_order_without_rollback(store, cart, caplog):
    store.failures['clear_cart'] = 'Failed to clear the cart.'

    with caplog.at_level(logging.WARNING, logger='app.orders.checkout'):
        result = place(store, cart)

    assert result.cart_cleared is False
    assert isinstance(result.inconsistency, PartialCheckoutInconsistency)
    assert result.inconsistency.order is result.order
    assert isinstance(result.order, Order)

    # order stands, no delete issued
    assert len(store.orders) == 1
    assert store.count('delete_order') == 0
    assert len(store.cart['s1']) == 3

    record = next(r for r in caplog.records if getattr(r, 'event', None) == 'checkout.cart_clear_failed')
    assert record.session_id == 's1'
    assert record.order_id == result.order.id
