"""Cart line model.

A cart is simply the set of ``CartLine`` rows owned by a user; there is
no separate cart header.  Each product appears at most once per user.
Lines hold no price: totals are always computed from the live catalog.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel


class CartLine(BaseModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart_lines",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="cart_lines",
    )
    quantity = models.PositiveIntegerField()

    class Meta:
        db_table = "cart_lines"
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "product"], name="cart_lines_user_product_uniq"
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="cart_lines_quantity_positive",
            ),
        ]

    @property
    def subtotal(self):
        return self.product.price * self.quantity

    def __str__(self) -> str:
        return f"{self.quantity} x {self.product_id} (user {self.user_id})"
