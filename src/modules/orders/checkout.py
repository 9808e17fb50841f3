"""Checkout orchestrator.

Turns a cart (or an explicit list of lines) into a ``PENDING`` order in a
single atomic unit:

1. Idempotency-key replay returns the original order untouched.
2. The user must exist; lines come from ``items`` or from the cart.
3. Every product must exist in the catalog.
4. Stock is reserved line by line through the inventory ledger, in
   ascending product-id order.  The first shortfall aborts the whole
   unit and the surrounding transaction rolls back earlier reservations.
5. The order is persisted with item snapshots, its creation history
   record and an ``OrderCreated`` outbox event.
6. A cart-sourced checkout empties the cart.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

import structlog
from django.db import transaction

from modules.core.exceptions import UserNotFound
from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCreated
from modules.orders.exceptions import EmptyCart
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.cart.repositories.interfaces import ICartRepository
    from modules.core.repositories.interfaces import IRepository
    from modules.inventory.services import InventoryLedger
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class CheckoutService:
    """Application service for order creation."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        cart_repository: ICartRepository,
        product_repository: IProductRepository,
        user_repository: IRepository,
        inventory_ledger: InventoryLedger,
    ) -> None:
        self._order_repo = order_repository
        self._cart_repo = cart_repository
        self._product_repo = product_repository
        self._user_repo = user_repository
        self._ledger = inventory_ledger

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a ``PENDING`` order and reserve its stock.

        Raises:
            UserNotFound: the user does not exist.
            EmptyCart: no ``items`` were given and the cart is empty.
            ProductNotFound: a product does not exist.
            InsufficientStock: a line exceeds the available stock.
        """
        log = logger.bind(user_id=dto.user_id, from_cart=dto.from_cart)
        log.info("order.creation_started")

        if dto.idempotency_key:
            existing = self._order_repo.get_by_idempotency_key(dto.idempotency_key)
            if existing:
                log.info(
                    "order.idempotency_hit",
                    order_id=str(existing.id),
                    key=dto.idempotency_key,
                )
                return existing

        if not self._user_repo.get_by_id(dto.user_id):
            raise UserNotFound(f"User {dto.user_id} not found.")

        lines = self._resolve_lines(dto)

        products = {}
        for product_id, _ in lines:
            product = self._product_repo.get_by_id(str(product_id))
            if not product:
                raise ProductNotFound(f"Product {product_id} not found.")
            products[product_id] = product

        order_number = self._order_repo.next_order_number()
        for product_id, quantity in lines:
            self._ledger.reserve(product_id, quantity, reference=order_number)

        order = self._order_repo.create(
            {
                "user_id": dto.user_id,
                "order_number": order_number,
                "idempotency_key": dto.idempotency_key,
                "shipping_address": dto.shipping_address,
                "remark": dto.remark,
                "items": [
                    {
                        "product_id": product_id,
                        "product_name": products[product_id].name,
                        "quantity": quantity,
                        "unit_price": products[product_id].price,
                    }
                    for product_id, quantity in lines
                ],
            }
        )

        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                order_number=order.order_number,
                user_id=dto.user_id,
                total_amount=str(order.total_amount),
            )
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes="Order created",
        )

        if dto.from_cart:
            self._cart_repo.clear(dto.user_id)

        log.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
            total_amount=str(order.total_amount),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    def _resolve_lines(self, dto: CreateOrderDTO) -> List[Tuple]:
        """``(product_id, quantity)`` pairs sorted by product id."""
        if dto.from_cart:
            cart_lines = self._cart_repo.get_lines(dto.user_id)
            if not cart_lines:
                raise EmptyCart(dto.user_id)
            lines = [(line.product_id, line.quantity) for line in cart_lines]
        else:
            lines = [(item.product_id, item.quantity) for item in dto.items]
        return sorted(lines, key=lambda line: str(line[0]))
