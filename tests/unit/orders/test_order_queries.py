"""Unit tests for the OrderService read side."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import OrderNotFound

pytestmark = pytest.mark.unit


@pytest.fixture()
def place_order(checkout_service, make_product):
    product = make_product(stock=100)

    def _place(user, quantity=1):
        return checkout_service.create_order(
            CreateOrderDTO(
                user_id=user.id,
                items=[CreateOrderItemDTO(product_id=product.id, quantity=quantity)],
            )
        )

    return _place


def test_get_order(order_service, place_order, user):
    order = place_order(user)
    assert order_service.get_order(str(order.id)).order_number == order.order_number


def test_get_order_unknown(order_service):
    with pytest.raises(OrderNotFound):
        order_service.get_order(str(uuid4()))


def test_get_order_invalid_id(order_service):
    with pytest.raises(OrderNotFound):
        order_service.get_order("nope")


def test_get_by_number(order_service, place_order, user):
    order = place_order(user)
    assert order_service.get_order_by_number(order.order_number).id == order.id


def test_get_by_number_unknown(order_service):
    with pytest.raises(OrderNotFound):
        order_service.get_order_by_number("ORD00000000000000000000")


def test_list_user_orders_newest_first(order_service, place_order, user, other_user):
    first = place_order(user)
    second = place_order(user)
    place_order(other_user)

    ids = [o.id for o in order_service.list_user_orders(user.id)]
    assert ids == [second.id, first.id]


def test_list_orders_by_status(order_service, place_order, user):
    paid = place_order(user)
    place_order(user)
    order_service.pay_order(paid.id)

    result = list(order_service.list_orders({"status": OrderStatus.PAID}))
    assert [o.id for o in result] == [paid.id]


def test_reads_are_idempotent(order_service, place_order, user):
    order = place_order(user)

    first = order_service.get_order(str(order.id))
    second = order_service.get_order(str(order.id))

    assert (first.status, first.total_amount, first.updated_at) == (
        second.status,
        second.total_amount,
        second.updated_at,
    )
