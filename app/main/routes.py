"""
app/main/routes.py
──────────────────
Landing redirect and health check.
"""
from datetime import datetime, timezone

from flask import redirect, url_for, current_app

from app.errors import FetchError
from app.main import main
from app.store import get_store


@main.route("/health")
def health():
    """Health check for load balancers and monitoring."""
    status = "ok"
    failures = []

    # Store check: the cheapest read the store exposes
    try:
        get_store().list_orders()
    except FetchError as e:
        status = "error"
        failures.append(f"Store: {e}")
        current_app.logger.error(f"Health check failed (store): {e}")

    response = {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "details": {
            "store": "ok" if not failures else "error",
        }
    }

    if failures:
        response["failures"] = failures

    return response, 200 if status == "ok" else 503


@main.route('/')
def index():
    """Guests land on their cart."""
    return redirect(url_for('cart.index'))
