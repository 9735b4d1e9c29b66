"""
app/cart/pricing.py
-------------------
Cart totals under a single flat tax rate.

Rounding order matters and is fixed:

    subtotal    = round(Σ line totals, 2)
    tax_amount  = round(subtotal × tax_rate, 2)     ← from the ROUNDED subtotal
    grand_total = subtotal + tax_amount             ← not re-rounded

All arithmetic uses Decimal with ROUND_HALF_UP — no float.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from app.cart.models import AggregatedCartItem, PriceTotals, Q
from app.cart.service import cart_subtotal


def compute_totals(items: Iterable[AggregatedCartItem], tax_rate) -> PriceTotals:
    """
    Compute subtotal, tax and grand total for the aggregated cart.
    An empty cart yields all-zero totals.
    """
    rate       = Decimal(str(tax_rate))
    subtotal   = cart_subtotal(items).quantize(Q, rounding=ROUND_HALF_UP)
    tax_amount = (subtotal * rate).quantize(Q, rounding=ROUND_HALF_UP)

    return PriceTotals(
        subtotal    = subtotal,
        tax_amount  = tax_amount,
        grand_total = subtotal + tax_amount,
    )
