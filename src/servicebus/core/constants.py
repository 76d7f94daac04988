"""Topic names and defaults."""

from __future__ import annotations

from typing import Final

ORDER_PLACED: Final = "order.placed"
INVENTORY_UPDATED: Final = "inventory.updated"
LOYALTY_UPDATED: Final = "loyalty.updated"
NOTIFICATION_SENT: Final = "notification.sent"

TOPICS: tuple[str, ...] = (
    ORDER_PLACED,
    INVENTORY_UPDATED,
    LOYALTY_UPDATED,
    NOTIFICATION_SENT,
)

DEFAULT_LATENCY_MS = 400
DEFAULT_LOG_DISPLAY_LIMIT = 20
LOW_STOCK_THRESHOLD = 10
