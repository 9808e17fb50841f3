"""Inventory ledger: the only code path that moves stock for orders.

Every mutation locks the product row (``SELECT FOR UPDATE``) for the
duration of the surrounding transaction, so concurrent reservations on
the same product are serialized and ``stock_quantity`` can never be
driven below zero.  Callers that touch several products must call in
ascending product-id order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction

from modules.inventory.exceptions import InsufficientStock
from modules.inventory.models import MovementType, StockMovement
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def _check_quantity(quantity: int) -> None:
    if quantity < 1:
        raise ValueError("Quantity must be at least 1.")


class InventoryLedger:
    """Reserve and release stock against the product catalog."""

    def __init__(self, product_repository: IProductRepository) -> None:
        self._product_repo = product_repository

    @transaction.atomic
    def reserve(self, product_id, quantity: int, reference: str = "") -> int:
        """Take ``quantity`` units out of stock and return the new level.

        Raises:
            ValueError: ``quantity`` is below 1.
            ProductNotFound: the product does not exist or is deleted.
            InsufficientStock: ``quantity`` exceeds the current stock.
        """
        _check_quantity(quantity)
        product = self._product_repo.get_for_update(str(product_id))
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")

        if product.stock_quantity < quantity:
            logger.warning(
                "inventory.insufficient_stock",
                product_id=str(product_id),
                requested=quantity,
                available=product.stock_quantity,
                reference=reference,
            )
            raise InsufficientStock(product.id, quantity, product.stock_quantity)

        product.stock_quantity -= quantity
        self._apply(product, -quantity, MovementType.RESERVE, reference)
        return product.stock_quantity

    @transaction.atomic
    def release(self, product_id, quantity: int, reference: str = "") -> Optional[int]:
        """Return ``quantity`` units to stock and return the new level.

        Soft-deleted products still receive their stock back.  A product
        that no longer exists at all is skipped with a warning and
        ``None`` is returned.
        """
        _check_quantity(quantity)
        product = self._product_repo.get_for_update(
            str(product_id), include_deleted=True
        )
        if not product:
            logger.warning(
                "inventory.release_skipped",
                product_id=str(product_id),
                quantity=quantity,
                reference=reference,
            )
            return None

        product.stock_quantity += quantity
        self._apply(product, quantity, MovementType.RELEASE, reference)
        return product.stock_quantity

    def _apply(
        self, product: Product, delta: int, movement_type: str, reference: str
    ) -> None:
        product.save(update_fields=["stock_quantity", "updated_at"])
        StockMovement.objects.create(
            product=product,
            quantity=delta,
            movement_type=movement_type,
            reference=reference,
            stock_after=product.stock_quantity,
        )
        logger.info(
            f"inventory.stock_{movement_type.lower()}d",
            product_id=str(product.id),
            quantity=abs(delta),
            stock_after=product.stock_quantity,
            reference=reference,
        )
