"""
app/cart/session.py
-------------------
Guest session token — the partition key for cart entries.

The token lives in the signed Flask session cookie under
SESSION_ID_KEY. It is generated once per browser, never validated and
never expires. This module is the only place that reads or writes it;
everything downstream takes the token as an explicit argument.

Format:  session_<epoch-ms>_<9 base-36 chars>
Example: session_1735712345678_k3j9x0q2a
"""
import secrets
import string
import time

from flask import session, current_app


_ALPHABET = string.digits + string.ascii_lowercase


def new_session_id() -> str:
    """Generate a fresh, practically-unique session token."""
    suffix = ''.join(secrets.choice(_ALPHABET) for _ in range(9))
    return f'session_{int(time.time() * 1000)}_{suffix}'


def get_or_create_session_id() -> str:
    """
    Return this browser's token, creating and storing it on first use.
    No network call; the cookie is only written when the token is new.
    """
    key = current_app.config['SESSION_ID_KEY']
    session_id = session.get(key)
    if not session_id:
        session_id = new_session_id()
        session[key] = session_id
        session.permanent = True   # respect PERMANENT_SESSION_LIFETIME
        current_app.logger.info(f'New guest session {session_id}')
    return session_id


def peek_session_id():
    """Token of the current request, or None. Never creates one."""
    return session.get(current_app.config['SESSION_ID_KEY'])
