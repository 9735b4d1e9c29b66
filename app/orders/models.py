"""
app/orders/models.py
--------------------
Customer details and the persisted Order snapshot.

An Order is built once, at checkout, from one aggregated cart and one
PriceTotals snapshot. After that it is never edited; the only lifecycle
step is completion, which removes it from the store's active set.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from app.cart.models import AggregatedCartItem, to_decimal, money_json


@dataclass(frozen=True)
class Customer:
    name:    str = ''
    contact: str = ''
    address: str = ''

    def normalized(self) -> 'Customer':
        """Copy with surrounding whitespace stripped from every field."""
        return Customer(
            name    = (self.name or '').strip(),
            contact = (self.contact or '').strip(),
            address = (self.address or '').strip(),
        )

    def missing_fields(self) -> List[str]:
        c = self.normalized()
        return [f for f in ('name', 'contact', 'address') if not getattr(c, f)]


def parse_order_date(value) -> Optional[datetime]:
    """
    Parse the store's ISO-8601 `orderDate`. Naive values are taken as UTC
    so that every parsed date is comparable. Unparseable → None.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Order:
    session_id:           str
    customer:             Customer
    payment_method_label: str
    items:                List[AggregatedCartItem] = field(default_factory=list)
    subtotal:             Decimal = Decimal('0.00')
    tax_amount:           Decimal = Decimal('0.00')
    grand_total:          Decimal = Decimal('0.00')
    id:                   Optional[str] = None
    order_date:           Optional[datetime] = None
    serial_number:        Optional[str] = None

    @classmethod
    def from_snapshot(cls, session_id, customer, items, totals, payment_method_label):
        return cls(
            session_id           = session_id,
            customer             = customer,
            payment_method_label = payment_method_label,
            items                = list(items),
            subtotal             = totals.subtotal,
            tax_amount           = totals.tax_amount,
            grand_total          = totals.grand_total,
        )

    def to_payload(self) -> dict:
        """Body for POST /place-order."""
        return {
            'sessionId':     self.session_id,
            'name':          self.customer.name,
            'contact':       self.customer.contact,
            'address':       self.customer.address,
            'paymentMethod': self.payment_method_label,
            'items':         [item.to_dict() for item in self.items],
            'subtotal':      money_json(self.subtotal),
            'gstAmount':     money_json(self.tax_amount),
            'grandTotal':    money_json(self.grand_total),
        }

    @classmethod
    def from_dict(cls, doc: dict) -> 'Order':
        """
        Parse an order document. The customer may be nested under
        `customer` or flattened onto the document; tax may be named
        `gstAmount` or `taxAmount`.
        """
        cust = doc.get('customer') or {}
        customer = Customer(
            name    = cust.get('name', doc.get('name', '')),
            contact = cust.get('contact', doc.get('contact', '')),
            address = cust.get('address', doc.get('address', '')),
        )
        order_id = doc.get('_id', doc.get('id'))
        serial = doc.get('serialNumber')
        tax = doc.get('gstAmount', doc.get('taxAmount'))

        return cls(
            id                   = str(order_id) if order_id is not None else None,
            session_id           = doc.get('sessionId', ''),
            customer             = customer,
            payment_method_label = doc.get('paymentMethod', doc.get('paymentMethodLabel', '')),
            items                = [AggregatedCartItem.from_dict(i) for i in doc.get('items') or []],
            subtotal             = to_decimal(doc.get('subtotal')),
            tax_amount           = to_decimal(tax),
            grand_total          = to_decimal(doc.get('grandTotal')),
            order_date           = parse_order_date(doc.get('orderDate')),
            serial_number        = str(serial) if serial is not None else None,
        )
