"""Read access to the auth user table for carts and orders."""

from __future__ import annotations

from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import models

from modules.core.repositories.interfaces import IRepository


class UserDjangoRepository(IRepository[Any]):
    """Looks up users of the configured ``AUTH_USER_MODEL``."""

    def __init__(self) -> None:
        self._model = get_user_model()

    def get_by_id(self, id: Any) -> Optional[Any]:
        try:
            return self._model.objects.filter(pk=id).first()
        except (TypeError, ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = self._model.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def save(self, entity: Any) -> Any:
        entity.save()
        return entity
