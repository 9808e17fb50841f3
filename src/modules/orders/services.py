"""Order service layer (Use Cases).

Owns the order lifecycle after checkout: status transitions validated
against the state machine, the timestamps that go with them, stock
release on cancellation and the read side of the orders API.  All write
operations are atomic: the service defines the unit-of-work boundary.

Rules enforced:
- Transitions follow ``VALID_TRANSITIONS``; anything else is rejected
  without touching the order.
- The order row is locked before the transition is validated, so of two
  concurrent transitions on one order exactly one wins.
- Cancellation returns every line's quantity to stock through the
  inventory ledger, in product-id order.
- Every accepted transition writes a history record and an outbox event.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

import structlog
from django.db import models, transaction
from django.utils import timezone

from modules.orders.constants import TRANSITION_TIMESTAMP_FIELDS, OrderStatus
from modules.orders.events import OrderCancelled, OrderStatusChanged
from modules.orders.exceptions import InvalidTransition, OrderNotFound

if TYPE_CHECKING:
    from modules.inventory.services import InventoryLedger
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order lifecycle use-cases.

    Receives the repository and the inventory ledger via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        inventory_ledger: InventoryLedger,
    ) -> None:
        self._order_repo = order_repository
        self._ledger = inventory_ledger

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(
        self,
        order_id: UUID,
        new_status: str,
        notes: str = "",
    ) -> Order:
        """Transition an order to a new status.

        Acquires a row-level lock (``SELECT FOR UPDATE``) on the order
        before validating the transition, so concurrent mutations of the
        same order are serialized.

        Raises:
            OrderNotFound: order does not exist.
            InvalidTransition: transition is not allowed (unknown statuses
                included).
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        old_status = order.status
        log = logger.bind(
            order_id=str(order.id),
            order_number=order.order_number,
            current_status=old_status,
            new_status=new_status,
        )

        if not order.can_transition_to(new_status):
            log.warning("order.invalid_transition")
            raise InvalidTransition(old_status, new_status)

        if new_status == OrderStatus.CANCELLED:
            self._release_stock(order)
            order.add_domain_event(
                OrderCancelled(aggregate_id=order.id, order_number=order.order_number)
            )

        order.status = new_status
        setattr(order, TRANSITION_TIMESTAMP_FIELDS[new_status], timezone.now())
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                old_status=old_status,
                new_status=new_status,
            )
        )
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=notes,
            old_status=old_status,
        )

        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order.id))

    def cancel_order(self, order_id: UUID, notes: str = "") -> Order:
        """Cancel an order and release its reserved stock."""
        return self.update_status(order_id, OrderStatus.CANCELLED, notes or "Order cancelled")

    def pay_order(self, order_id: UUID, notes: str = "") -> Order:
        return self.update_status(order_id, OrderStatus.PAID, notes)

    def ship_order(self, order_id: UUID, notes: str = "") -> Order:
        return self.update_status(order_id, OrderStatus.SHIPPED, notes)

    def deliver_order(self, order_id: UUID, notes: str = "") -> Order:
        return self.update_status(order_id, OrderStatus.DELIVERED, notes)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def get_order_by_number(self, order_number: str) -> Order:
        """Retrieve a single order by its order number.

        Raises:
            OrderNotFound: if no order carries that number.
        """
        order = self._order_repo.get_by_number(order_number)
        if not order:
            raise OrderNotFound(f"Order {order_number} not found.")
        return order

    def list_user_orders(self, user_id: int) -> models.QuerySet:
        """Orders placed by ``user_id``, newest first."""
        return self._order_repo.list_for_user(user_id)

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """Return orders, newest first, optionally filtered."""
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _release_stock(self, order: Order) -> None:
        # Same product-id order as checkout reservations.
        items = sorted(order.items.all(), key=lambda item: str(item.product_id))
        for item in items:
            self._ledger.release(
                item.product_id, item.quantity, reference=order.order_number
            )
