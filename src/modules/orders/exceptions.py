"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist."""


class InvalidTransition(Exception):
    """The order state machine does not allow the requested status change."""

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot transition from {from_status} to {to_status}.")


class EmptyCart(Exception):
    """Checkout from the cart was requested but the cart has no lines."""

    def __init__(self, user_id) -> None:
        self.user_id = user_id
        super().__init__(f"Cart of user {user_id} is empty.")
