"""Unit tests for CartService.

Covers:
- add_item merges quantities into a single line.
- Resulting quantity is validated against live stock.
- set_quantity replaces, and removes on quantity <= 0.
- remove_item / clear_cart are idempotent.
- Cart operations never touch stock.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.cart.exceptions import CartLineNotFound
from modules.cart.models import CartLine
from modules.core.exceptions import UserNotFound
from modules.inventory.exceptions import InsufficientStock
from modules.products.exceptions import ProductNotFound

pytestmark = pytest.mark.unit


class TestAddItem:
    def test_creates_line(self, cart_service, user, make_product):
        product = make_product(stock=5)

        line = cart_service.add_item(user.id, product.id, 2)

        assert line.quantity == 2
        assert CartLine.objects.filter(user=user).count() == 1

    def test_adding_again_merges_quantity(self, cart_service, user, make_product):
        product = make_product(stock=5)

        cart_service.add_item(user.id, product.id, 2)
        line = cart_service.add_item(user.id, product.id, 3)

        assert line.quantity == 5
        assert CartLine.objects.filter(user=user).count() == 1

    def test_merged_quantity_checked_against_stock(self, cart_service, user, make_product):
        product = make_product(stock=5)
        cart_service.add_item(user.id, product.id, 4)

        with pytest.raises(InsufficientStock) as exc_info:
            cart_service.add_item(user.id, product.id, 2)

        assert exc_info.value.requested == 6
        assert exc_info.value.available == 5
        assert CartLine.objects.get(user=user).quantity == 4

    def test_does_not_reserve_stock(self, cart_service, user, make_product):
        product = make_product(stock=5)
        cart_service.add_item(user.id, product.id, 5)

        product.refresh_from_db()
        assert product.stock_quantity == 5

    def test_unknown_product(self, cart_service, user):
        with pytest.raises(ProductNotFound):
            cart_service.add_item(user.id, uuid4(), 1)

    def test_unknown_user(self, cart_service, make_product):
        with pytest.raises(UserNotFound):
            cart_service.add_item(999999, make_product().id, 1)

    def test_zero_quantity_rejected(self, cart_service, user, make_product):
        with pytest.raises(ValueError):
            cart_service.add_item(user.id, make_product().id, 0)


class TestSetQuantity:
    def test_replaces_quantity(self, cart_service, user, make_product):
        product = make_product(stock=10)
        cart_service.add_item(user.id, product.id, 2)

        line = cart_service.set_quantity(user.id, product.id, 7)

        assert line.quantity == 7

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_removes_line(self, cart_service, user, make_product, quantity):
        product = make_product(stock=10)
        cart_service.add_item(user.id, product.id, 2)

        assert cart_service.set_quantity(user.id, product.id, quantity) is None
        assert not CartLine.objects.filter(user=user).exists()

    def test_missing_line_raises(self, cart_service, user, make_product):
        with pytest.raises(CartLineNotFound):
            cart_service.set_quantity(user.id, make_product().id, 1)

    def test_above_stock_rejected(self, cart_service, user, make_product):
        product = make_product(stock=3)
        cart_service.add_item(user.id, product.id, 1)

        with pytest.raises(InsufficientStock):
            cart_service.set_quantity(user.id, product.id, 4)
        assert CartLine.objects.get(user=user).quantity == 1


class TestRemoveAndClear:
    def test_remove_is_idempotent(self, cart_service, user, make_product):
        product = make_product()
        cart_service.add_item(user.id, product.id, 1)

        assert cart_service.remove_item(user.id, product.id) is True
        assert cart_service.remove_item(user.id, product.id) is False

    def test_clear_returns_count_and_only_touches_owner(
        self, cart_service, user, other_user, make_product
    ):
        a = make_product(name="A")
        b = make_product(name="B")
        cart_service.add_item(user.id, a.id, 1)
        cart_service.add_item(user.id, b.id, 1)
        cart_service.add_item(other_user.id, a.id, 1)

        assert cart_service.clear_cart(user.id) == 2
        assert cart_service.clear_cart(user.id) == 0
        assert len(cart_service.get_cart(other_user.id)) == 1


class TestGetCart:
    def test_lines_in_insertion_order(self, cart_service, user, make_product):
        first = make_product(name="Zed")
        second = make_product(name="Abe")
        cart_service.add_item(user.id, first.id, 1)
        cart_service.add_item(user.id, second.id, 2)

        lines = cart_service.get_cart(user.id)

        assert [line.product_id for line in lines] == [first.id, second.id]
        assert lines[1].subtotal == second.price * 2

    def test_reading_twice_is_stable(self, cart_service, user, make_product):
        cart_service.add_item(user.id, make_product().id, 1)
        first = [(l.product_id, l.quantity) for l in cart_service.get_cart(user.id)]
        second = [(l.product_id, l.quantity) for l in cart_service.get_cart(user.id)]
        assert first == second

    def test_unknown_user(self, cart_service):
        with pytest.raises(UserNotFound):
            cart_service.get_cart(424242)
