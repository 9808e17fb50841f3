"""Inventory domain exceptions."""

from __future__ import annotations


class InsufficientStock(Exception):
    """Requested quantity exceeds the product's available stock.

    Raised by the inventory ledger on reservation and by the cart when the
    resulting line quantity cannot be covered by current stock.
    """

    def __init__(self, product_id, requested: int, available: int) -> None:
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}."
        )
