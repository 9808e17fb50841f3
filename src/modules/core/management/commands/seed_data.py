from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.cart.repositories.django_repository import CartDjangoRepository
from modules.cart.services import CartService
from modules.core.repositories.users import UserDjangoRepository
from modules.inventory.exceptions import InsufficientStock
from modules.inventory.services import InventoryLedger
from modules.orders.checkout import CheckoutService
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product, ProductStatus
from modules.products.repositories.django_repository import ProductDjangoRepository

# Status each seeded order is walked to, with its relative weight.
STATUS_PATHS = [
    ([], 0.25),
    ([OrderStatus.PAID], 0.25),
    ([OrderStatus.PAID, OrderStatus.SHIPPED], 0.15),
    ([OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.DELIVERED], 0.15),
    ([OrderStatus.CANCELLED], 0.20),
]

CATALOG = [
    ('Monitor 27"', "electronics", Decimal("1299.90")),
    ("Mechanical Keyboard", "electronics", Decimal("399.90")),
    ("Gaming Mouse", "electronics", Decimal("249.90")),
    ('Laptop 14"', "electronics", Decimal("3999.00")),
    ("Headset", "electronics", Decimal("299.90")),
    ("Office Desk", "furniture", Decimal("899.00")),
    ("Ergonomic Chair", "furniture", Decimal("1499.00")),
    ("Bookshelf", "furniture", Decimal("699.00")),
    ("A4 Paper", "office", Decimal("29.90")),
    ("Blue Pen", "office", Decimal("4.90")),
    ("Notebook", "office", Decimal("19.90")),
    ("Stapler", "office", Decimal("39.90")),
    ("Sticky Notes", "office", Decimal("12.90")),
    ("Calculator", "office", Decimal("89.90")),
    ("LED Lamp", "office", Decimal("59.90")),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=30)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        product_repository = ProductDjangoRepository()
        ledger = InventoryLedger(product_repository=product_repository)
        order_repository = OrderDjangoRepository()
        self._checkout = CheckoutService(
            order_repository=order_repository,
            cart_repository=CartDjangoRepository(),
            product_repository=product_repository,
            user_repository=UserDjangoRepository(),
            inventory_ledger=ledger,
        )
        self._orders = OrderService(
            order_repository=order_repository, inventory_ledger=ledger
        )
        self._cart = CartService(
            cart_repository=CartDjangoRepository(),
            product_repository=product_repository,
            user_repository=UserDjangoRepository(),
        )

        users = self._seed_users()
        products = self._seed_products()
        orders_created = self._seed_orders(users, products, options["orders"])
        cart_lines = self._seed_cart(users[-1], products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"products={len(products)}, "
                f"orders={orders_created}, "
                f"cart_lines={cart_lines}"
            )
        )

    def _seed_users(self) -> list:
        User = get_user_model()
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
        users = [User.objects.get(username="admin")]
        for username in ("alice", "bob", "carol"):
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(username, password=f"{username}123")
            users.append(user)
        return users

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for name, category, price in CATALOG:
            product, _ = Product.objects.get_or_create(
                name=name,
                deleted_at=None,
                defaults={
                    "description": f"{name} ({category})",
                    "category": category,
                    "price": price,
                    "stock_quantity": random.randint(20, 200),
                    "status": ProductStatus.ACTIVE,
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, users: list, products: list[Product], count: int) -> int:
        self.stdout.write("Creating orders...")
        created = 0
        paths = [path for path, _ in STATUS_PATHS]
        weights = [weight for _, weight in STATUS_PATHS]

        for i in range(count):
            key = f"seed-order-{i + 1}"
            if Order.objects.filter(idempotency_key=key).exists():
                continue

            user = random.choice(users)
            picked = random.sample(products, k=random.randint(1, 4))
            dto = CreateOrderDTO(
                user_id=user.pk,
                items=[
                    CreateOrderItemDTO(product_id=p.id, quantity=random.randint(1, 3))
                    for p in picked
                ],
                shipping_address=f"{i + 1} Seed Street",
                idempotency_key=key,
            )
            try:
                order = self._checkout.create_order(dto)
            except InsufficientStock as exc:
                self.stdout.write(self.style.WARNING(f"Skipping {key}: {exc}"))
                continue

            for new_status in random.choices(paths, weights=weights, k=1)[0]:
                order = self._orders.update_status(order.id, new_status, "Seed data")
            created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created

    def _seed_cart(self, user, products: list[Product]) -> int:
        if self._cart.get_cart(user.pk):
            return 0
        for product in products[:3]:
            product.refresh_from_db()
            if product.stock_quantity:
                self._cart.add_item(user.pk, product.id, 1)
        return len(self._cart.get_cart(user.pk))
