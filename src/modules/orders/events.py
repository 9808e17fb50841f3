"""Domain events for the Orders bounded context.

Fields beyond the base event carry defaults so the dataclasses can extend
``DomainEvent`` and be rebuilt from outbox payloads.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when checkout persists a new order."""

    order_number: str = ""
    user_id: int = 0
    total_amount: str = "0.00"


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled and its stock released."""

    order_number: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised on every accepted status transition."""

    old_status: str = ""
    new_status: str = ""
