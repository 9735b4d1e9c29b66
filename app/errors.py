"""
app/errors.py
-------------
Failure taxonomy for the cart and order lifecycle.

    ValidationError               bad input, caught before any store call
    FetchError                    transport failure or non-2xx store reply
    PartialCheckoutInconsistency  order placed, cart clear failed

None of these are fatal: views turn them into flashed messages and the
guest (or staff member) retries by repeating the action.
"""


class OrderingError(Exception):
    """Base class for every error raised by the ordering workflow."""


class ValidationError(OrderingError):
    """One or more required fields are missing or invalid."""

    def __init__(self, fields, message=None):
        self.fields = list(fields)
        if message is None:
            message = 'Please fill out: ' + ', '.join(self.fields) + '.'
        super().__init__(message)


class FetchError(OrderingError):
    """
    The store could not be reached or answered with a non-2xx status.
    `message` is the server-supplied text when it sent one, otherwise a
    generic per-operation fallback.
    """

    def __init__(self, message, status=None):
        self.status = status
        super().__init__(message)

    @property
    def message(self):
        return self.args[0]


class PartialCheckoutInconsistency(OrderingError):
    """
    The order was created but the session's cart entries were not cleared.
    Reported and logged only; the order stands.
    """

    def __init__(self, order, cause):
        self.order = order
        self.cause = cause
        super().__init__(
            f'Order {order.id or "(unassigned)"} placed but cart for session '
            f'{order.session_id} was not cleared: {cause}'
        )
