"""Unit tests for OrderService status transitions.

Covers:
- Forward path PENDING -> PAID -> SHIPPED -> DELIVERED with timestamps.
- Cancellation from PENDING and PAID restores stock (net-zero ledger).
- Rejected transitions leave the order, stock and history unchanged.
- History and outbox records for every accepted transition.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.core.models import OutboxEvent
from modules.inventory.models import MovementType, StockMovement
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO
from modules.orders.exceptions import InvalidTransition, OrderNotFound
from modules.orders.models import Order

pytestmark = pytest.mark.unit


@pytest.fixture()
def p1(make_product):
    return make_product(name="P1", price="10.00", stock=10)


@pytest.fixture()
def p2(make_product):
    return make_product(name="P2", price="5.00", stock=4)


@pytest.fixture()
def order(checkout_service, cart_service, user, p1, p2):
    cart_service.add_item(user.id, p1.id, 2)
    cart_service.add_item(user.id, p2.id, 1)
    return checkout_service.create_order(CreateOrderDTO(user_id=user.id))


class TestForwardPath:
    def test_pay_ship_deliver(self, order_service, order):
        paid = order_service.pay_order(order.id)
        assert paid.status == OrderStatus.PAID
        assert paid.paid_at is not None

        shipped = order_service.ship_order(order.id)
        assert shipped.status == OrderStatus.SHIPPED
        assert shipped.shipped_at is not None

        delivered = order_service.deliver_order(order.id)
        assert delivered.status == OrderStatus.DELIVERED
        assert delivered.delivered_at is not None
        assert delivered.cancelled_at is None

    def test_forward_transitions_do_not_touch_stock(self, order_service, order, p1):
        order_service.pay_order(order.id)
        order_service.ship_order(order.id)

        p1.refresh_from_db()
        assert p1.stock_quantity == 8

    def test_history_records_each_step(self, order_service, order):
        order_service.update_status(order.id, OrderStatus.PAID, notes="card ok")

        history = list(Order.objects.get(id=order.id).status_history.all())
        assert [(h.old_status, h.new_status) for h in history] == [
            (None, OrderStatus.PENDING),
            (OrderStatus.PENDING, OrderStatus.PAID),
        ]
        assert history[-1].notes == "card ok"

    def test_status_changed_event_in_outbox(self, order_service, order):
        order_service.pay_order(order.id)

        event = OutboxEvent.objects.get(
            aggregate_id=str(order.id), event_type="OrderStatusChanged"
        )
        assert event.payload["old_status"] == OrderStatus.PENDING
        assert event.payload["new_status"] == OrderStatus.PAID


class TestCancellation:
    def test_cancel_pending_restores_stock(self, order_service, order, p1, p2):
        cancelled = order_service.cancel_order(order.id)

        assert cancelled.status == OrderStatus.CANCELLED
        assert cancelled.cancelled_at is not None
        p1.refresh_from_db()
        p2.refresh_from_db()
        assert p1.stock_quantity == 10
        assert p2.stock_quantity == 4

    def test_cancel_paid_restores_stock(self, order_service, order, p1):
        order_service.pay_order(order.id)
        order_service.cancel_order(order.id)

        p1.refresh_from_db()
        assert p1.stock_quantity == 10

    def test_second_cancel_is_rejected_without_double_release(
        self, order_service, order, p1
    ):
        order_service.cancel_order(order.id)

        with pytest.raises(InvalidTransition) as exc_info:
            order_service.cancel_order(order.id)

        assert exc_info.value.from_status == OrderStatus.CANCELLED
        assert exc_info.value.to_status == OrderStatus.CANCELLED
        p1.refresh_from_db()
        assert p1.stock_quantity == 10

    def test_ledger_nets_to_zero(self, order_service, order):
        order_service.cancel_order(order.id)

        movements = StockMovement.objects.filter(reference=order.order_number)
        assert sum(m.quantity for m in movements) == 0
        assert movements.filter(movement_type=MovementType.RELEASE).count() == 2

    def test_cancel_shipped_is_rejected(self, order_service, order, p1):
        order_service.pay_order(order.id)
        order_service.ship_order(order.id)

        with pytest.raises(InvalidTransition):
            order_service.cancel_order(order.id)

        p1.refresh_from_db()
        assert p1.stock_quantity == 8

    def test_cancel_writes_cancelled_event(self, order_service, order):
        order_service.cancel_order(order.id)
        assert OutboxEvent.objects.filter(
            aggregate_id=str(order.id), event_type="OrderCancelled"
        ).exists()

    def test_stock_returns_to_soft_deleted_product(self, order_service, order, p1):
        p1.delete()
        order_service.cancel_order(order.id)

        p1.refresh_from_db()
        assert p1.stock_quantity == 10


class TestRejectedTransitions:
    def test_pending_to_shipped_is_rejected(self, order_service, order):
        with pytest.raises(InvalidTransition):
            order_service.update_status(order.id, OrderStatus.SHIPPED)

        assert Order.objects.get(id=order.id).status == OrderStatus.PENDING

    def test_rejected_transition_changes_nothing(self, order_service, order):
        before = Order.objects.get(id=order.id)
        history_count = before.status_history.count()
        outbox_count = OutboxEvent.objects.count()

        with pytest.raises(InvalidTransition):
            order_service.update_status(order.id, OrderStatus.DELIVERED)

        after = Order.objects.get(id=order.id)
        assert after.updated_at == before.updated_at
        assert after.status_history.count() == history_count
        assert OutboxEvent.objects.count() == outbox_count

    def test_unknown_status_is_rejected(self, order_service, order):
        with pytest.raises(InvalidTransition) as exc_info:
            order_service.update_status(order.id, "REFUNDED")
        assert exc_info.value.to_status == "REFUNDED"

    def test_terminal_delivered(self, order_service, order):
        order_service.pay_order(order.id)
        order_service.ship_order(order.id)
        order_service.deliver_order(order.id)

        with pytest.raises(InvalidTransition):
            order_service.update_status(order.id, OrderStatus.PAID)

    def test_unknown_order(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.update_status(uuid4(), OrderStatus.PAID)
