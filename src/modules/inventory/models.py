"""Stock movement ledger.

Append-only record of every change the inventory ledger applies to
``Product.stock_quantity``.  Reservations are stored with a negative
``quantity`` and releases with a positive one, so the sum over an order's
``reference`` is zero once the order is cancelled.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class MovementType(models.TextChoices):
    RESERVE = "RESERVE", "Reserve"
    RELEASE = "RELEASE", "Release"


class StockMovement(BaseModel):
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="stock_movements",
    )
    quantity = models.IntegerField()
    movement_type = models.CharField(max_length=10, choices=MovementType.choices)
    reference = models.CharField(max_length=50, blank=True, default="")
    stock_after = models.PositiveIntegerField()

    class Meta:
        db_table = "stock_movements"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["reference"], name="stock_mov_reference_idx"),
            models.Index(
                fields=["product", "created_at"], name="stock_mov_product_idx"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.movement_type} {self.quantity:+d} ({self.reference})"
