"""Product service layer (Use Cases).

Catalog CRUD for the Product aggregate, delegating persistence to the
injected ``IProductRepository``.  Stock changes caused by orders do not
pass through here; they go through ``modules.inventory``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import models, transaction

from modules.products.exceptions import ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 10

_UPDATABLE_FIELDS = (
    "name",
    "price",
    "description",
    "stock_quantity",
    "category",
    "image_url",
    "status",
)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        product = Product(
            name=dto.name,
            price=dto.price,
            description=dto.description,
            stock_quantity=dto.stock_quantity,
            category=dto.category,
            image_url=dto.image_url,
            status=dto.status,
        )
        product = self._repo.save(product)
        logger.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        The product row is locked first so a catalog stock correction
        cannot interleave with a concurrent reservation.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        changed = []
        for field in _UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)
                changed.append(field)

        product = self._repo.save(product)
        logger.info("product.updated", product_id=str(id), fields=changed)
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Soft-delete a product.  Existing order lines keep their snapshot.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def list_low_stock(self, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> List[Product]:
        """Products with fewer than ``threshold`` units left."""
        if threshold < 0:
            raise ValueError("Threshold cannot be negative.")
        return self._repo.list_low_stock(threshold)

    def category_statistics(self) -> List[Dict[str, Any]]:
        return self._repo.count_by_category()
