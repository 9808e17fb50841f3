from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.cart.repositories.django_repository import CartDjangoRepository
from modules.cart.services import CartService
from modules.core.repositories.users import UserDjangoRepository
from modules.inventory.services import InventoryLedger
from modules.orders.checkout import CheckoutService
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product, ProductStatus
from modules.products.repositories.django_repository import ProductDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def user():
    return get_user_model().objects.create_user("buyer", password="buyer-pass-123")


@pytest.fixture()
def other_user():
    return get_user_model().objects.create_user("other", password="other-pass-123")


@pytest.fixture()
def auth_client(api_client, user):
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture()
def make_product():
    def _make(name="Widget", price="10.00", stock=10, **extra):
        return Product.objects.create(
            name=name,
            price=Decimal(price),
            stock_quantity=stock,
            status=extra.pop("status", ProductStatus.ACTIVE),
            **extra,
        )

    return _make


# ---------------------------------------------------------------------------
# Services wired to the Django repositories
# ---------------------------------------------------------------------------


@pytest.fixture()
def product_repository():
    return ProductDjangoRepository()


@pytest.fixture()
def ledger(product_repository):
    return InventoryLedger(product_repository=product_repository)


@pytest.fixture()
def cart_service(product_repository):
    return CartService(
        cart_repository=CartDjangoRepository(),
        product_repository=product_repository,
        user_repository=UserDjangoRepository(),
    )


@pytest.fixture()
def order_service(ledger):
    return OrderService(order_repository=OrderDjangoRepository(), inventory_ledger=ledger)


@pytest.fixture()
def checkout_service(product_repository, ledger):
    return CheckoutService(
        order_repository=OrderDjangoRepository(),
        cart_repository=CartDjangoRepository(),
        product_repository=product_repository,
        user_repository=UserDjangoRepository(),
        inventory_ledger=ledger,
    )
