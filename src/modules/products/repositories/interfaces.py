"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups the catalog and the
inventory ledger need: row-locked reads for stock mutation, low-stock
reporting and per-category counts.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_for_update(self, id: str, include_deleted: bool = False) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Used by the inventory ledger for atomic stock reservation/release.
        Returns ``None`` if the product does not exist.
        """

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Soft-delete a product by ID."""

    @abstractmethod
    def list_low_stock(self, threshold: int) -> List[Product]:
        """Return live products whose stock is strictly below ``threshold``."""

    @abstractmethod
    def count_by_category(self) -> List[Dict[str, Any]]:
        """Return ``[{"category": ..., "count": ...}]`` for live products."""
