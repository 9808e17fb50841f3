"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator

from modules.products.models import ProductStatus


def _check_price(v: Decimal | None) -> Decimal | None:
    if v is not None and v < 0:
        raise ValueError("Price cannot be negative.")
    return v


def _check_stock(v: int | None) -> int | None:
    if v is not None and v < 0:
        raise ValueError("Stock quantity cannot be negative.")
    return v


def _check_status(v: str | None) -> str | None:
    if v is not None and v not in ProductStatus.values:
        raise ValueError(f"Status must be one of {', '.join(ProductStatus.values)}.")
    return v


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is a non-empty string.
    - ``price`` is a non-negative Decimal.
    - ``stock_quantity`` is non-negative.
    - ``status`` is one of ``ProductStatus``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    description: str = ""
    stock_quantity: int = 0
    category: str = ""
    image_url: str = ""
    status: str = ProductStatus.ACTIVE.value

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        return _check_price(v)

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_not_be_negative(cls, v: int) -> int:
        return _check_stock(v)

    @field_validator("status")
    @classmethod
    def status_must_be_known(cls, v: str) -> str:
        return _check_status(v)


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional — only supplied fields will be updated.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    price: Decimal | None = None
    description: str | None = None
    stock_quantity: int | None = None
    category: str | None = None
    image_url: str | None = None
    status: str | None = None

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal | None) -> Decimal | None:
        return _check_price(v)

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_not_be_negative(cls, v: int | None) -> int | None:
        return _check_stock(v)

    @field_validator("status")
    @classmethod
    def status_must_be_known(cls, v: str | None) -> str | None:
        return _check_status(v)
