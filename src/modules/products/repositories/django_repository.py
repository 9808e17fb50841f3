"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising — the Service Layer decides how to translate a missing
entity into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog

from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a live (not soft-deleted) product by primary key.

        Returns ``None`` for non-existent, deleted or invalid IDs.
        """
        try:
            return Product.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str, include_deleted: bool = False) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Must be called inside ``transaction.atomic``.  ``include_deleted``
        lets stock be restored to a product that was soft-deleted after
        it was ordered.
        """
        queryset = Product.objects.all() if include_deleted else Product.objects.alive()
        try:
            return queryset.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """List live products with optional Django ORM look-ups.

        Examples of valid filters::

            {"status": "active"}
            {"category": "books"}
        """
        queryset = Product.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("product.saved", product_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete a product by ID.

        Returns ``True`` if the product was found and soft-deleted,
        ``False`` if no live product exists with the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True

    def list_low_stock(self, threshold: int) -> List[Product]:
        return list(
            Product.objects.alive()
            .filter(stock_quantity__lt=threshold)
            .order_by("stock_quantity", "name")
        )

    def count_by_category(self) -> List[Dict[str, Any]]:
        return list(
            Product.objects.alive()
            .values("category")
            .annotate(count=models.Count("id"))
            .order_by("category")
        )
