import pytest

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO

pytestmark = pytest.mark.integration


@pytest.fixture()
def many_orders(checkout_service, user, make_product):
    product = make_product(stock=1000)
    for _ in range(25):
        checkout_service.create_order(
            CreateOrderDTO(
                user_id=user.id,
                items=[CreateOrderItemDTO(product_id=product.id, quantity=1)],
            )
        )


def test_default_page_size(auth_client, many_orders):
    body = auth_client.get("/api/v1/orders/").json()
    assert body["count"] == 25
    assert len(body["results"]) == 20
    assert body["next"] is not None


def test_custom_page_size(auth_client, many_orders):
    body = auth_client.get("/api/v1/orders/", {"page_size": 5, "page": 2}).json()
    assert len(body["results"]) == 5


def test_page_size_is_capped(auth_client, many_orders):
    body = auth_client.get("/api/v1/orders/", {"page_size": 1000}).json()
    assert len(body["results"]) == 25


def test_user_orders_are_paginated(auth_client, user, many_orders):
    body = auth_client.get(f"/api/v1/orders/user/{user.id}/", {"page_size": 10}).json()
    assert body["count"] == 25
    assert len(body["results"]) == 10


def test_products_are_paginated(auth_client, make_product):
    for i in range(3):
        make_product(name=f"P{i}")
    body = auth_client.get("/api/v1/products/", {"page_size": 2}).json()
    assert body["count"] == 3
    assert len(body["results"]) == 2
