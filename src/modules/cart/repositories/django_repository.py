"""Django ORM implementation of the Cart repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError
from django.db import models

from modules.cart.models import CartLine
from modules.cart.repositories.interfaces import ICartRepository


class CartDjangoRepository(ICartRepository):
    """Concrete Cart repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[CartLine]:
        try:
            return CartLine.objects.select_related("product").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = CartLine.objects.select_related("product")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def save(self, entity: CartLine) -> CartLine:
        entity.save()
        return entity

    def get_lines(self, user_id) -> List[CartLine]:
        return list(
            CartLine.objects.select_related("product")
            .filter(user_id=user_id)
            .order_by("created_at", "id")
        )

    def get_line(self, user_id, product_id, for_update: bool = False) -> Optional[CartLine]:
        if for_update:
            queryset = CartLine.objects.select_for_update()
        else:
            queryset = CartLine.objects.select_related("product")
        try:
            return queryset.filter(user_id=user_id, product_id=product_id).first()
        except (ValueError, ValidationError):
            return None

    def delete_line(self, user_id, product_id) -> bool:
        try:
            deleted, _ = CartLine.objects.filter(
                user_id=user_id, product_id=product_id
            ).delete()
        except (ValueError, ValidationError):
            return False
        return deleted > 0

    def clear(self, user_id) -> int:
        deleted, _ = CartLine.objects.filter(user_id=user_id).delete()
        return deleted
