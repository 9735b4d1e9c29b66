"""
app/cart/__init__.py
--------------------
Guest cart blueprint.
URL prefix: /cart
"""
from flask import Blueprint

cart = Blueprint('cart', __name__)

from app.cart import routes  # noqa: E402, F401
