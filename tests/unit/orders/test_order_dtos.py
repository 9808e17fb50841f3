from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO

pytestmark = pytest.mark.unit


def test_items_default_to_cart_checkout():
    dto = CreateOrderDTO(user_id=1)
    assert dto.items == []
    assert dto.from_cart


def test_explicit_items_are_not_cart_checkout():
    dto = CreateOrderDTO(
        user_id=1, items=[CreateOrderItemDTO(product_id=uuid4(), quantity=1)]
    )
    assert not dto.from_cart


def test_duplicate_products_rejected():
    product_id = uuid4()
    with pytest.raises(ValidationError, match="Duplicate product IDs"):
        CreateOrderDTO(
            user_id=1,
            items=[
                CreateOrderItemDTO(product_id=product_id, quantity=1),
                CreateOrderItemDTO(product_id=product_id, quantity=2),
            ],
        )


@pytest.mark.parametrize("quantity", [0, -1])
def test_item_quantity_must_be_positive(quantity):
    with pytest.raises(ValidationError):
        CreateOrderItemDTO(product_id=uuid4(), quantity=quantity)
