"""
app/store
---------
Client side of the external document store (cart entries + orders).
"""
from app.store.client import StoreClient, get_store, init_store  # noqa: F401
