"""Cart DRF serializers."""

from __future__ import annotations

from decimal import Decimal
from typing import List

from rest_framework import serializers

from modules.cart.models import CartLine


class AddCartItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class SetCartQuantitySerializer(serializers.Serializer):
    """``quantity <= 0`` is accepted and removes the line."""

    quantity = serializers.IntegerField()


class CartLineSerializer(serializers.ModelSerializer):
    """Cart line priced from the live catalog."""

    product_id = serializers.UUIDField(read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    unit_price = serializers.DecimalField(
        source="product.price", max_digits=10, decimal_places=2, read_only=True
    )
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartLine
        fields = [
            "product_id",
            "product_name",
            "unit_price",
            "quantity",
            "subtotal",
            "created_at",
        ]
        read_only_fields = fields


def serialize_cart(user_id, lines: List[CartLine]) -> dict:
    total = sum((line.subtotal for line in lines), Decimal("0.00"))
    return {
        "user_id": user_id,
        "items": CartLineSerializer(lines, many=True).data,
        "total_quantity": sum(line.quantity for line in lines),
        "total_amount": f"{total:.2f}",
    }
