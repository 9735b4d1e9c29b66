"""
app/orders/fulfillment.py
-------------------------
Staff-side order queue.

Lifecycle per order:  placed ──(complete)──▶ completed

Completing is a single DELETE against the store; the order leaves the
active queue for good (no undo, no archive). The yes/no confirmation
lives in the view and the CLI, before `complete_order` is ever called.
"""
import logging
from datetime import datetime, timezone
from typing import List

from app.orders.models import Order

logger = logging.getLogger(__name__)

# Orders without a usable date sort after every dated order.
_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def sort_newest_first(orders: List[Order]) -> List[Order]:
    """Sort by order_date descending. Stable: ties keep store order."""
    return sorted(orders, key=lambda o: o.order_date or _UNDATED, reverse=True)


def list_active_orders(store) -> List[Order]:
    """Fetch placed orders, most recent first. FetchError propagates."""
    docs = store.list_orders() or []
    return sort_newest_first([Order.from_dict(doc) for doc in docs])


def complete_order(store, order_id: str) -> None:
    """Mark an order completed (removes it from the active set)."""
    store.delete_order(order_id)
    logger.info('Order %s marked as completed', order_id)


def remove_completed(orders: List[Order], order_id: str) -> List[Order]:
    """Drop a completed order from an in-memory list, keeping the rest in order."""
    return [o for o in orders if o.id != order_id]
