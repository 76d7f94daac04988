"""Envelope, handler contract, and typed payloads for the demo services."""

from __future__ import annotations

import functools
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any, Protocol

from servicebus.core.constants import (
    INVENTORY_UPDATED,
    LOYALTY_UPDATED,
    NOTIFICATION_SENT,
    ORDER_PLACED,
)


@dataclass(frozen=True)
class Envelope:
    """Logged record of one publish call. Immutable once appended."""

    topic: str
    payload: Any
    sequence: int
    created_at: float


class Handler(Protocol):
    """Receives a payload; may publish further events; settles or raises."""

    def __call__(self, payload: Any) -> Awaitable[None] | None: ...


@dataclass
class MenuItem:
    """A catalog entry an order is made of."""

    name: str
    price: float
    ingredient: str | None = None
    ingredient_qty: int = 1


@dataclass
class OrderPlaced:
    """A customer order was accepted."""

    order_id: str
    customer_name: str
    items: list[MenuItem]
    total: float
    service: str = "OrderService"


@dataclass
class InventoryUpdated:
    """Stock was deducted for an order."""

    order_id: str
    deductions: dict[str, int]
    stock: dict[str, int]
    service: str = "InventoryService"


@dataclass
class LoyaltyUpdated:
    """Points were awarded to a customer."""

    order_id: str
    customer_name: str
    points_earned: int
    total_points: int
    tier: str
    service: str = "LoyaltyService"


@dataclass
class NotificationSent:
    """A customer-facing message went out."""

    message: str
    channel: str  # "email" | "push"
    order_id: str | None = None
    service: str = "NotificationService"
    raw: dict[str, Any] = field(default_factory=dict)


def event(topic: str):
    """Decorator to mark a factory as producing a payload for a given topic."""

    def decorator(f: Any) -> Any:
        @functools.wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> tuple[str, object]:
            payload = f(*args, **kwargs)
            return (topic, payload)

        wrapper.TOPIC = topic  # type: ignore[attr-defined]
        return wrapper

    return decorator


@event(ORDER_PLACED)
def order_placed(
    order_id: str,
    customer_name: str,
    items: list[MenuItem],
) -> OrderPlaced:
    total = round(sum(item.price for item in items), 2)
    return OrderPlaced(
        order_id=order_id,
        customer_name=customer_name,
        items=list(items),
        total=total,
    )


@event(INVENTORY_UPDATED)
def inventory_updated(
    order_id: str, deductions: dict[str, int], stock: dict[str, int]
) -> InventoryUpdated:
    return InventoryUpdated(order_id=order_id, deductions=dict(deductions), stock=dict(stock))


@event(LOYALTY_UPDATED)
def loyalty_updated(
    order_id: str,
    customer_name: str,
    points_earned: int,
    total_points: int,
    tier: str,
) -> LoyaltyUpdated:
    return LoyaltyUpdated(
        order_id=order_id,
        customer_name=customer_name,
        points_earned=points_earned,
        total_points=total_points,
        tier=tier,
    )


@event(NOTIFICATION_SENT)
def notification_sent(
    message: str,
    channel: str,
    *,
    order_id: str | None = None,
) -> NotificationSent:
    return NotificationSent(message=message, channel=channel, order_id=order_id)
