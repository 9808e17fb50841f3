"""Unit tests for the InventoryLedger.

Covers:
- Reserve decrements stock and records a RESERVE movement.
- Reserving more than the stock raises and changes nothing.
- Release increments stock with no upper bound.
- Release on soft-deleted products still restores stock.
- Quantity must be at least 1.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.inventory.exceptions import InsufficientStock
from modules.inventory.models import MovementType, StockMovement
from modules.products.exceptions import ProductNotFound

pytestmark = pytest.mark.unit


class TestReserve:
    def test_decrements_and_returns_new_stock(self, ledger, make_product):
        product = make_product(stock=10)

        remaining = ledger.reserve(product.id, 3, reference="ORD-A")

        product.refresh_from_db()
        assert remaining == 7
        assert product.stock_quantity == 7

    def test_records_negative_movement(self, ledger, make_product):
        product = make_product(stock=10)
        ledger.reserve(product.id, 3, reference="ORD-A")

        movement = StockMovement.objects.get(product=product)
        assert movement.movement_type == MovementType.RESERVE
        assert movement.quantity == -3
        assert movement.stock_after == 7
        assert movement.reference == "ORD-A"

    def test_exact_stock_can_be_reserved(self, ledger, make_product):
        product = make_product(stock=2)
        assert ledger.reserve(product.id, 2) == 0

    def test_insufficient_stock_leaves_stock_untouched(self, ledger, make_product):
        """Two buyers, one unit: the second reservation fails cleanly."""
        product = make_product(stock=1)

        ledger.reserve(product.id, 1)
        with pytest.raises(InsufficientStock) as exc_info:
            ledger.reserve(product.id, 1)

        assert exc_info.value.requested == 1
        assert exc_info.value.available == 0
        assert exc_info.value.product_id == product.id
        product.refresh_from_db()
        assert product.stock_quantity == 0
        assert StockMovement.objects.filter(product=product).count() == 1

    def test_second_reservation_larger_than_remainder_fails(self, ledger, make_product):
        product = make_product(stock=10)

        assert ledger.reserve(product.id, 4) == 6
        with pytest.raises(InsufficientStock):
            ledger.reserve(product.id, 7)

        product.refresh_from_db()
        assert product.stock_quantity == 6

    def test_unknown_product_raises(self, ledger):
        with pytest.raises(ProductNotFound):
            ledger.reserve(uuid4(), 1)

    def test_soft_deleted_product_cannot_be_reserved(self, ledger, make_product):
        product = make_product(stock=5)
        product.delete()
        with pytest.raises(ProductNotFound):
            ledger.reserve(product.id, 1)

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, ledger, make_product, quantity):
        product = make_product(stock=5)
        with pytest.raises(ValueError):
            ledger.reserve(product.id, quantity)
        product.refresh_from_db()
        assert product.stock_quantity == 5


class TestRelease:
    def test_increments_without_upper_bound(self, ledger, make_product):
        product = make_product(stock=5)

        assert ledger.release(product.id, 100, reference="ORD-B") == 105

        movement = StockMovement.objects.get(product=product)
        assert movement.movement_type == MovementType.RELEASE
        assert movement.quantity == 100

    def test_soft_deleted_product_gets_stock_back(self, ledger, make_product):
        product = make_product(stock=5)
        product.delete()

        assert ledger.release(product.id, 2) == 7

    def test_missing_product_is_skipped(self, ledger):
        assert ledger.release(uuid4(), 2) is None
        assert StockMovement.objects.count() == 0

    def test_non_positive_quantity_rejected(self, ledger, make_product):
        product = make_product(stock=5)
        with pytest.raises(ValueError):
            ledger.release(product.id, 0)


class TestNetZero:
    def test_reserve_then_release_nets_to_zero(self, ledger, make_product):
        product = make_product(stock=8)

        ledger.reserve(product.id, 5, reference="ORD-C")
        ledger.release(product.id, 5, reference="ORD-C")

        product.refresh_from_db()
        assert product.stock_quantity == 8
        movements = StockMovement.objects.filter(reference="ORD-C")
        assert sum(m.quantity for m in movements) == 0
