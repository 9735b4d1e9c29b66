from flask import (
    render_template, redirect, url_for,
    request, flash, session, current_app
)

from app.cart import cart
from app.cart.pricing import compute_totals
from app.cart.service import load_aggregated_cart, cart_count, remove_entry
from app.cart.session import get_or_create_session_id
from app.errors import FetchError, ValidationError
from app.orders.checkout import submit_order, validate_customer
from app.orders.models import Customer
from app.store import get_store

CHECKOUT_FORM_KEY = 'checkout_form'   # guest input kept across the redirect


def _render_cart(form=None, status=200):
    """Load, aggregate and price the cart, then render the cart page."""
    session_id = get_or_create_session_id()
    error      = None
    items      = []

    try:
        items = load_aggregated_cart(get_store(), session_id)
    except FetchError as exc:
        error = exc.message

    totals = compute_totals(items, current_app.config['TAX_RATE'])

    return render_template(
        'cart/index.html',
        title='Your Cart',
        items=items,
        item_count=cart_count(items),
        totals=totals,
        error=error,
        form=form or Customer(),
        payment_method=current_app.config['PAYMENT_METHOD_LABEL'],
    ), status


# ── CART PAGE ─────────────────────────────────────────────────────

@cart.route('/')
def index():
    """Grouped cart lines, totals and the checkout form."""
    kept = session.pop(CHECKOUT_FORM_KEY, None)
    return _render_cart(form=Customer(**kept) if kept else None)


# ── REMOVE ENTRY ──────────────────────────────────────────────────

@cart.route('/remove', methods=['POST'])
def remove():
    """
    Delete one raw cart entry, then redirect so the page reloads and
    re-aggregates from the store.
    """
    session_id = get_or_create_session_id()
    entry_id   = request.form.get('entry_id', '').strip()

    if not entry_id:
        flash('No cart item selected.', 'error')
        return redirect(url_for('cart.index'))

    try:
        remove_entry(get_store(), session_id, entry_id)
        flash('Item removed from cart.', 'success')
    except FetchError as exc:
        current_app.logger.warning(f"Cart remove failed (session {session_id}, entry {entry_id}): {exc}")
        flash(exc.message, 'error')

    return redirect(url_for('cart.index'))


# ── CHECKOUT ──────────────────────────────────────────────────────

def _back_to_cart(customer, message):
    """Flash the error and keep what the guest typed for the next render."""
    flash(message, 'error')
    session[CHECKOUT_FORM_KEY] = {
        'name':    customer.name,
        'contact': customer.contact,
        'address': customer.address,
    }
    return redirect(url_for('cart.index'))


@cart.route('/checkout', methods=['POST'])
def checkout():
    """
    Place the order:
      1. Validate the customer fields (no store call on failure)
      2. Reload + re-aggregate the cart from the store
      3. Compute totals and submit (order first, then cart clear)
      4. Render the confirmation with the placed order
    """
    session_id = get_or_create_session_id()
    customer   = Customer(
        name    = request.form.get('name', ''),
        contact = request.form.get('contact', ''),
        address = request.form.get('address', ''),
    )
    store = get_store()

    try:
        validate_customer(customer)
        items  = load_aggregated_cart(store, session_id)
        totals = compute_totals(items, current_app.config['TAX_RATE'])
        result = submit_order(
            store, session_id, customer, items, totals,
            current_app.config['PAYMENT_METHOD_LABEL'],
        )

    except ValidationError as exc:
        return _back_to_cart(customer, str(exc))

    except FetchError as exc:
        current_app.logger.error(f"Checkout failed (session {session_id}): {exc}")
        flash(exc.message, 'error')
        return _render_cart(form=customer, status=502)

    if not result.cart_cleared:
        # Order stands; stale entries are swept out of band.
        current_app.logger.warning(f"Checkout left stale cart for session {session_id}")

    flash('Order placed successfully!', 'success')
    return render_template(
        'cart/placed.html',
        title='Order Placed',
        order=result.order,
    )
