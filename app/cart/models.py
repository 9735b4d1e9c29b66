"""
app/cart/models.py
------------------
Plain data classes for the cart.

CartLineEntry       one raw add-to-cart record as the store returns it
AggregatedCartItem  entries merged by product identity (view model only)
PriceTotals         subtotal / tax / grand total snapshot

Money is Decimal everywhere inside the app. Conversion to float happens
only when a payload is serialised for the store.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


Q = Decimal('0.01')   # quantize target


def to_decimal(value) -> Decimal:
    """
    Store documents carry prices as numbers or strings; None means 0.
    Unparseable values raise decimal.InvalidOperation, non-finite ones
    ValueError.
    """
    if value is None or value == '':
        return Decimal('0')
    amount = Decimal(str(value))
    if not amount.is_finite():
        raise ValueError(f'non-finite amount: {value!r}')
    return amount


def money_json(amount: Decimal) -> float:
    return float(amount.quantize(Q))


@dataclass
class CartLineEntry:
    id:         Optional[str]
    session_id: Optional[str]
    name:       str
    price:      Decimal
    quantity:   int = 1
    product_id: Optional[str] = None
    cuisine:    str = ''
    section:    str = ''
    image:      str = ''

    @classmethod
    def from_dict(cls, doc: dict) -> 'CartLineEntry':
        quantity = doc.get('quantity')
        product_id = doc.get('productId')
        entry_id = doc.get('_id', doc.get('id'))
        return cls(
            id         = str(entry_id) if entry_id is not None else None,
            session_id = doc.get('sessionId'),
            name       = doc.get('name', ''),
            price      = to_decimal(doc.get('price')),
            quantity   = int(quantity) if quantity else 1,
            product_id = str(product_id) if product_id else None,
            cuisine    = doc.get('cuisine', ''),
            section    = doc.get('section', ''),
            image      = doc.get('image', ''),
        )


@dataclass
class AggregatedCartItem:
    product_identity: str
    name:             str
    unit_price:       Decimal
    quantity:         int
    total_price:      Decimal
    product_id:       Optional[str] = None
    cuisine:          str = ''
    section:          str = ''
    image:            str = ''
    entry_ids:        List[str] = field(default_factory=list)

    @property
    def entry_id(self) -> Optional[str]:
        """Id of the first entry in the group; what the Remove button deletes."""
        return self.entry_ids[0] if self.entry_ids else None

    def to_dict(self) -> dict:
        return {
            '_id':        self.entry_id,
            'productId':  self.product_id,
            'name':       self.name,
            'cuisine':    self.cuisine,
            'section':    self.section,
            'image':      self.image,
            'price':      money_json(self.unit_price),
            'quantity':   self.quantity,
            'totalPrice': money_json(self.total_price),
        }

    @classmethod
    def from_dict(cls, doc: dict) -> 'AggregatedCartItem':
        """Rebuild an order line from a stored order's `items` array."""
        quantity   = int(doc.get('quantity') or 1)
        unit_price = to_decimal(doc.get('price'))
        if doc.get('totalPrice') is not None:
            total = to_decimal(doc['totalPrice'])
        else:
            total = (unit_price * quantity).quantize(Q)
        product_id = doc.get('productId')
        return cls(
            product_identity = str(product_id) if product_id else doc.get('name', ''),
            name             = doc.get('name', ''),
            unit_price       = unit_price,
            quantity         = quantity,
            total_price      = total,
            product_id       = str(product_id) if product_id else None,
            cuisine          = doc.get('cuisine', ''),
            section          = doc.get('section', ''),
            image            = doc.get('image', ''),
            entry_ids        = [str(doc['_id'])] if doc.get('_id') else [],
        )


@dataclass(frozen=True)
class PriceTotals:
    subtotal:    Decimal = Decimal('0.00')
    tax_amount:  Decimal = Decimal('0.00')
    grand_total: Decimal = Decimal('0.00')
