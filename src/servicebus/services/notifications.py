"""Notification service: tells customers about orders and points."""

from __future__ import annotations

from servicebus.core.constants import LOYALTY_UPDATED, ORDER_PLACED
from servicebus.dispatch.bus import Bus
from servicebus.events import LoyaltyUpdated, OrderPlaced, notification_sent
from servicebus.services.base import ServiceBase


class NotificationService(ServiceBase):
    def __init__(self, bus: Bus) -> None:
        super().__init__(bus)
        self._sent: list[str] = []

    @property
    def name(self) -> str:
        return "NotificationService"

    @property
    def sent(self) -> list[str]:
        return list(self._sent)

    def attach(self) -> None:
        self._subscribe(ORDER_PLACED, self.on_order_placed)
        self._subscribe(LOYALTY_UPDATED, self.on_loyalty_updated)

    async def on_order_placed(self, evt: OrderPlaced) -> None:
        msg = f"Order {evt.order_id} confirmed for {evt.customer_name}"
        self._sent.append(msg)
        topic, out = notification_sent(msg, "email", order_id=evt.order_id)
        await self._bus.publish(topic, out)

    async def on_loyalty_updated(self, evt: LoyaltyUpdated) -> None:
        msg = (
            f"{evt.customer_name} earned {evt.points_earned} pts -> "
            f"{evt.total_points} total ({evt.tier})"
        )
        self._sent.append(msg)
        topic, out = notification_sent(msg, "push", order_id=evt.order_id)
        await self._bus.publish(topic, out)
