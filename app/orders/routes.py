"""
app/orders/routes.py
────────────────────
Staff order queue: list active orders, confirm and complete them.

Completing an order is irreversible, so it takes two requests:
GET shows a Yes / No confirmation page, and only a POST carrying
confirm=yes reaches the store.
"""
from flask import render_template, redirect, url_for, request, flash, current_app

from app.errors import FetchError
from app.orders import orders
from app.orders.fulfillment import list_active_orders, complete_order
from app.store import get_store


@orders.route('/')
def index():
    """Active orders, most recent first."""
    error  = None
    active = []

    try:
        active = list_active_orders(get_store())
    except FetchError as exc:
        current_app.logger.error(f"Order queue load failed: {exc}")
        error = exc.message

    return render_template(
        'orders/index.html',
        title='All Orders',
        orders=active,
        error=error,
    )


@orders.route('/<order_id>/complete', methods=['GET'])
def confirm_complete(order_id):
    """Yes / No gate before the order is removed from the queue."""
    return render_template(
        'orders/confirm_complete.html',
        title='Complete Order',
        order_id=order_id,
    )


@orders.route('/<order_id>/complete', methods=['POST'])
def complete(order_id):
    if request.form.get('confirm') != 'yes':
        flash('Order not completed.', 'info')
        return redirect(url_for('orders.index'))

    try:
        complete_order(get_store(), order_id)
        flash('Order marked as completed!', 'success')
    except FetchError as exc:
        current_app.logger.error(f"Completing order {order_id} failed: {exc}")
        flash(exc.message, 'error')

    return redirect(url_for('orders.index'))
