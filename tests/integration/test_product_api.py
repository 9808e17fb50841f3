"""Integration tests for the Product API."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


class TestProductCrud:
    def test_requires_authentication(self, api_client):
        assert api_client.get(URL).status_code == 401

    def test_create(self, auth_client):
        response = auth_client.post(
            URL,
            {"name": "Lamp", "price": "19.90", "stock_quantity": 4, "category": "home"},
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Lamp"
        assert body["price"] == "19.90"
        assert body["status"] == "active"

    def test_create_rejects_negative_price(self, auth_client):
        response = auth_client.post(URL, {"name": "Lamp", "price": "-1"}, format="json")
        assert response.status_code == 400
        assert "negative" in response.json()["detail"]

    def test_create_requires_price(self, auth_client):
        response = auth_client.post(URL, {"name": "Lamp"}, format="json")
        assert response.status_code == 400

    def test_retrieve(self, auth_client, make_product):
        product = make_product(name="Mug")
        response = auth_client.get(f"{URL}{product.id}/")
        assert response.status_code == 200
        assert response.json()["name"] == "Mug"

    def test_retrieve_unknown(self, auth_client):
        response = auth_client.get(f"{URL}{uuid4()}/")
        assert response.status_code == 404
        assert response.json() == {"detail": "Product not found."}

    def test_partial_update(self, auth_client, make_product):
        product = make_product(price="5.00")
        response = auth_client.patch(
            f"{URL}{product.id}/", {"price": "6.50"}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["price"] == "6.50"

    def test_update_stock(self, auth_client, make_product):
        product = make_product(stock=1)
        response = auth_client.patch(
            f"{URL}{product.id}/stock/", {"stock_quantity": 40}, format="json"
        )
        assert response.status_code == 200
        product.refresh_from_db()
        assert product.stock_quantity == 40

    def test_update_stock_rejects_negative(self, auth_client, make_product):
        product = make_product(stock=1)
        response = auth_client.patch(
            f"{URL}{product.id}/stock/", {"stock_quantity": -1}, format="json"
        )
        assert response.status_code == 400

    def test_soft_delete(self, auth_client, make_product):
        product = make_product()
        response = auth_client.delete(f"{URL}{product.id}/")

        assert response.status_code == 204
        assert Product.objects.get(id=product.id).is_deleted
        assert auth_client.get(f"{URL}{product.id}/").status_code == 404


class TestProductListing:
    def test_filters(self, auth_client, make_product):
        make_product(name="Cheap Book", price="5.00", category="books")
        make_product(name="Pricey Book", price="50.00", category="books")
        make_product(name="Toy", price="7.00", category="toys")

        response = auth_client.get(URL, {"category": "books", "max_price": "10"})

        names = [p["name"] for p in response.json()["results"]]
        assert names == ["Cheap Book"]

    def test_status_filter(self, auth_client, make_product):
        make_product(name="On", status="active")
        make_product(name="Off", status="inactive")

        response = auth_client.get(URL, {"status": "inactive"})

        assert [p["name"] for p in response.json()["results"]] == ["Off"]

    def test_low_stock(self, auth_client, make_product):
        make_product(name="Few", stock=2)
        make_product(name="Many", stock=50)

        response = auth_client.get(f"{URL}low-stock/", {"threshold": 5})

        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Few"]

    def test_low_stock_invalid_threshold(self, auth_client):
        assert auth_client.get(f"{URL}low-stock/", {"threshold": "x"}).status_code == 400

    def test_categories(self, auth_client, make_product):
        make_product(name="A", category="books")
        make_product(name="B", category="books")
        make_product(name="C", category="toys")

        response = auth_client.get(f"{URL}categories/")

        assert response.json() == [
            {"category": "books", "count": 2},
            {"category": "toys", "count": 1},
        ]
