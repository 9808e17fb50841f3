"""Cart domain exceptions."""

from __future__ import annotations


class CartLineNotFound(Exception):
    """The user's cart has no line for the given product."""

    def __init__(self, user_id, product_id) -> None:
        self.user_id = user_id
        self.product_id = product_id
        super().__init__(f"Cart of user {user_id} has no line for product {product_id}.")
