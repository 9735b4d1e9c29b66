"""
app/cart/service.py
-------------------
Loading, grouping and removing cart entries.

The store keeps one entry per add-to-cart click, so the same dish can
appear many times. `aggregate` folds them into one line per product:

    entries                                   aggregated
    ─────────────────────────────────────     ─────────────────────────
    {name: "Paneer Tikka", price: 10, qty: 2}  Paneer Tikka  ×3  = 30.00
    {name: "Paneer Tikka", price: 10, qty: 1}

Nothing here is cached. After a removal the caller reloads and
re-aggregates; one removal can change a quantity shared with other
entries, so patching the old view in place is not safe.
"""
import logging
from decimal import Decimal
from typing import Iterable, List

from app.cart.models import CartLineEntry, AggregatedCartItem
from app.errors import FetchError

logger = logging.getLogger(__name__)


def load_cart(store, session_id: str) -> List[CartLineEntry]:
    """
    Fetch every raw entry for the session. Single attempt; FetchError
    propagates to the caller. A reply that does not parse as cart
    entries (bad price or quantity, non-object rows) is a failed fetch
    too.
    """
    docs = store.list_cart_entries(session_id) or []
    try:
        return [CartLineEntry.from_dict(doc) for doc in docs]
    except (ArithmeticError, ValueError, TypeError, AttributeError) as exc:
        logger.warning('Malformed cart entries for session %s: %r', session_id, exc)
        raise FetchError('Failed to fetch cart items.') from exc


def product_identity(entry: CartLineEntry) -> str:
    """Stable product id when the entry has one, else its display name."""
    if entry.product_id:
        return f'id:{entry.product_id}'
    return f'name:{entry.name}'


def aggregate(entries: Iterable[CartLineEntry]) -> List[AggregatedCartItem]:
    """
    Group entries by product identity, summing quantity and line total.
    Output keeps the first-seen order of each identity. Pure.
    """
    grouped = {}

    for entry in entries:
        key        = product_identity(entry)
        qty        = entry.quantity or 1
        line_total = entry.price * qty

        item = grouped.get(key)
        if item is None:
            grouped[key] = AggregatedCartItem(
                product_identity = key,
                name             = entry.name,
                unit_price       = entry.price,
                quantity         = qty,
                total_price      = line_total,
                product_id       = entry.product_id,
                cuisine          = entry.cuisine,
                section          = entry.section,
                image            = entry.image,
                entry_ids        = [entry.id] if entry.id else [],
            )
        else:
            item.quantity    += qty
            item.total_price += line_total
            if entry.id:
                item.entry_ids.append(entry.id)

    return list(grouped.values())


def cart_count(items: Iterable[AggregatedCartItem]) -> int:
    """Total number of units across the aggregated cart."""
    return sum((item.quantity for item in items), 0)


def remove_entry(store, session_id: str, entry_id: str) -> None:
    """Delete one raw entry. The caller must reload the cart afterwards."""
    store.delete_cart_entry(session_id, entry_id)


def load_aggregated_cart(store, session_id: str) -> List[AggregatedCartItem]:
    return aggregate(load_cart(store, session_id))


def cart_subtotal(items: Iterable[AggregatedCartItem]) -> Decimal:
    return sum((item.total_price for item in items), Decimal('0'))
