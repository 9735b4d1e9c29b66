"""
app/orders/checkout.py
----------------------
Turn an aggregated cart into a placed order.

Steps
─────
1. Validate customer fields and a non-empty cart. On failure raise
   ValidationError; the store is never contacted.

2. POST the order snapshot. If that fails, re-raise FetchError. The
   cart is left untouched and step 3 is NOT attempted, so the guest can
   simply retry.

3. Clear the session's cart entries. The two store calls share no
   transaction. If this step fails the order still stands (the guest
   already has it) — we never roll the order back. Instead a structured
   `checkout.cart_clear_failed` event is logged so stale entries can be
   swept later (`flask clear-cart`), and the result carries a
   PartialCheckoutInconsistency.

Step 3 is only issued after step 2 has returned successfully.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from app.cart.models import AggregatedCartItem, PriceTotals
from app.errors import FetchError, PartialCheckoutInconsistency, ValidationError
from app.orders.models import Customer, Order

logger = logging.getLogger(__name__)


@dataclass
class CheckoutResult:
    order:         Order
    cart_cleared:  bool
    inconsistency: Optional[PartialCheckoutInconsistency] = None


def validate_customer(customer: Customer) -> None:
    """Raise ValidationError naming every empty customer field."""
    missing = customer.missing_fields()
    if missing:
        raise ValidationError(missing)


def validate_checkout(customer: Customer, items: Sequence[AggregatedCartItem]) -> None:
    """Customer fields first, then a non-empty cart."""
    validate_customer(customer)
    if not items:
        raise ValidationError(['items'], 'Your cart is empty.')


def submit_order(
        store,
        session_id: str,
        customer: Customer,
        items: Sequence[AggregatedCartItem],
        totals: PriceTotals,
        payment_method_label: str,
) -> CheckoutResult:
    validate_checkout(customer, items)

    snapshot = Order.from_snapshot(
        session_id, customer.normalized(), items, totals, payment_method_label
    )

    # ── (a) create the order ──────────────────────────────────────
    reply = store.place_order(snapshot.to_payload())
    order = _placed_order(reply, snapshot)
    logger.info(
        'Order placed: id=%s serial=%s session=%s total=%s',
        order.id, order.serial_number, session_id, order.grand_total,
    )

    # ── (b) clear the cart, only after (a) succeeded ──────────────
    try:
        store.clear_cart(session_id)
    except FetchError as exc:
        inconsistency = PartialCheckoutInconsistency(order, exc)
        logger.warning(
            str(inconsistency),
            extra={
                'event':      'checkout.cart_clear_failed',
                'session_id': session_id,
                'order_id':   order.id,
            },
        )
        return CheckoutResult(order=order, cart_cleared=False, inconsistency=inconsistency)

    return CheckoutResult(order=order, cart_cleared=True)


def _placed_order(reply, snapshot: Order) -> Order:
    """
    The store may echo the created order (bare or under `order`) or just
    acknowledge. Fields the echo carries win; the rest come from our
    snapshot.
    """
    if isinstance(reply, dict):
        doc = reply.get('order') if isinstance(reply.get('order'), dict) else reply
        if doc.get('_id') or doc.get('id'):
            merged = {**snapshot.to_payload(), **doc}
            if not merged.get('items'):
                merged['items'] = snapshot.to_payload()['items']
            return Order.from_dict(merged)
    return snapshot
