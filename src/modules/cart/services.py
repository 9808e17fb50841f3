"""Cart service layer (Use Cases).

Per-user shopping cart.  Cart writes check the *resulting* line quantity
against the live stock level but never reserve anything: stock only
moves at checkout through the inventory ledger.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog
from django.db import transaction

from modules.cart.exceptions import CartLineNotFound
from modules.cart.models import CartLine
from modules.core.exceptions import UserNotFound
from modules.inventory.exceptions import InsufficientStock
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.cart.repositories.interfaces import ICartRepository
    from modules.core.repositories.interfaces import IRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class CartService:
    """Application service for cart use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        cart_repository: ICartRepository,
        product_repository: IProductRepository,
        user_repository: IRepository,
    ) -> None:
        self._cart_repo = cart_repository
        self._product_repo = product_repository
        self._user_repo = user_repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_cart(self, user_id) -> List[CartLine]:
        """Lines of the user's cart, oldest first.

        Raises:
            UserNotFound: the user does not exist.
        """
        self._ensure_user(user_id)
        return self._cart_repo.get_lines(user_id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_item(self, user_id, product_id, quantity: int) -> CartLine:
        """Add ``quantity`` units, merging into an existing line.

        Raises:
            ValueError: ``quantity`` is below 1.
            UserNotFound / ProductNotFound: unknown user or product.
            InsufficientStock: the merged quantity exceeds current stock.
        """
        if quantity < 1:
            raise ValueError("Quantity must be at least 1.")
        self._ensure_user(user_id)
        product = self._get_product(product_id)

        line = self._cart_repo.get_line(user_id, product.id, for_update=True)
        resulting = quantity + (line.quantity if line else 0)
        self._check_stock(product, resulting)

        if line is None:
            line = CartLine(user_id=user_id, product=product, quantity=resulting)
        else:
            line.quantity = resulting
            line.product = product
        line = self._cart_repo.save(line)

        logger.info(
            "cart.item_added",
            user_id=user_id,
            product_id=str(product.id),
            added=quantity,
            quantity=resulting,
        )
        return line

    @transaction.atomic
    def set_quantity(self, user_id, product_id, quantity: int) -> Optional[CartLine]:
        """Replace a line's quantity.  ``quantity <= 0`` removes the line.

        Returns the updated line, or ``None`` when the line was removed.

        Raises:
            UserNotFound / ProductNotFound: unknown user or product.
            CartLineNotFound: the cart has no line for this product.
            InsufficientStock: ``quantity`` exceeds current stock.
        """
        self._ensure_user(user_id)
        if quantity <= 0:
            self.remove_item(user_id, product_id)
            return None

        product = self._get_product(product_id)
        line = self._cart_repo.get_line(user_id, product.id, for_update=True)
        if line is None:
            raise CartLineNotFound(user_id, product_id)
        self._check_stock(product, quantity)

        line.quantity = quantity
        line.product = product
        line = self._cart_repo.save(line)
        logger.info(
            "cart.quantity_set",
            user_id=user_id,
            product_id=str(product.id),
            quantity=quantity,
        )
        return line

    @transaction.atomic
    def remove_item(self, user_id, product_id) -> bool:
        """Remove a line.  Removing a missing line is not an error."""
        self._ensure_user(user_id)
        removed = self._cart_repo.delete_line(user_id, product_id)
        if removed:
            logger.info("cart.item_removed", user_id=user_id, product_id=str(product_id))
        return removed

    @transaction.atomic
    def clear_cart(self, user_id) -> int:
        """Remove every line and return how many were removed."""
        self._ensure_user(user_id)
        count = self._cart_repo.clear(user_id)
        logger.info("cart.cleared", user_id=user_id, lines=count)
        return count

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_user(self, user_id) -> None:
        if not self._user_repo.get_by_id(user_id):
            raise UserNotFound(f"User {user_id} not found.")

    def _get_product(self, product_id) -> Product:
        product = self._product_repo.get_by_id(str(product_id))
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")
        return product

    @staticmethod
    def _check_stock(product: Product, requested: int) -> None:
        if requested > product.stock_quantity:
            raise InsufficientStock(product.id, requested, product.stock_quantity)
