"""Cart repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.cart.models import CartLine


class ICartRepository(IRepository["CartLine"]):
    """Repository contract for cart lines, always scoped to one user."""

    @abstractmethod
    def get_lines(self, user_id) -> List[CartLine]:
        """All lines of the user's cart, oldest first, products joined."""

    @abstractmethod
    def get_line(self, user_id, product_id, for_update: bool = False) -> Optional[CartLine]:
        """The line for ``product_id`` or ``None``."""

    @abstractmethod
    def delete_line(self, user_id, product_id) -> bool:
        """Delete one line.  Returns whether a row was removed."""

    @abstractmethod
    def clear(self, user_id) -> int:
        """Delete every line of the user's cart and return how many."""
