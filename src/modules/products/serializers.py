"""Product DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock_quantity",
            "category",
            "image_url",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class StockUpdateSerializer(serializers.Serializer):
    """Validates ``PATCH /products/{id}/stock/``."""

    stock_quantity = serializers.IntegerField(min_value=0)


class CategoryCountSerializer(serializers.Serializer):
    category = serializers.CharField(allow_blank=True)
    count = serializers.IntegerField()
