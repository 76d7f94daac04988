"""Tests for payload types and factories."""

from __future__ import annotations

from servicebus.core.constants import (
    INVENTORY_UPDATED,
    LOYALTY_UPDATED,
    NOTIFICATION_SENT,
    ORDER_PLACED,
)
from servicebus.events import (
    MenuItem,
    OrderPlaced,
    inventory_updated,
    loyalty_updated,
    notification_sent,
    order_placed,
)


def test_factories_carry_topic() -> None:
    assert order_placed.TOPIC == ORDER_PLACED
    assert inventory_updated.TOPIC == INVENTORY_UPDATED
    assert loyalty_updated.TOPIC == LOYALTY_UPDATED
    assert notification_sent.TOPIC == NOTIFICATION_SENT


def test_order_placed_totals_items() -> None:
    items = [MenuItem("Flat White", 5.00), MenuItem("Oat Milk Add-on", 0.75)]
    topic, evt = order_placed("ORD-1234", "Ada", items)
    assert topic == ORDER_PLACED
    assert isinstance(evt, OrderPlaced)
    assert evt.total == 5.75
    assert evt.service == "OrderService"
    assert evt.items == items
    assert evt.items is not items


def test_inventory_updated_copies_mappings() -> None:
    stock = {"Oat Milk": 3}
    _, evt = inventory_updated("ORD-1", {"Oat Milk": 3}, stock)
    stock["Oat Milk"] = 0
    assert evt.stock == {"Oat Milk": 3}
    assert evt.service == "InventoryService"


def test_notification_defaults() -> None:
    topic, evt = notification_sent("hi", "push")
    assert topic == NOTIFICATION_SENT
    assert evt.order_id is None
    assert evt.channel == "push"
    assert evt.raw == {}


def test_loyalty_updated_fields() -> None:
    _, evt = loyalty_updated("ORD-1", "Ada", 57, 200, "Silver")
    assert (evt.points_earned, evt.total_points, evt.tier) == (57, 200, "Silver")
