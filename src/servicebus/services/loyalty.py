"""Loyalty service: awards points per order and tracks tiers."""

from __future__ import annotations

import math
from dataclasses import dataclass

from servicebus.core.constants import ORDER_PLACED
from servicebus.dispatch.bus import Bus
from servicebus.events import OrderPlaced, loyalty_updated
from servicebus.services.base import ServiceBase

POINTS_PER_UNIT = 10
TIERS: tuple[tuple[int, str], ...] = ((500, "Gold"), (150, "Silver"), (0, "Newcomer"))


@dataclass
class Account:
    points: int = 0
    tier: str = "Newcomer"


def tier_for(points: int) -> str:
    for threshold, tier in TIERS:
        if points >= threshold:
            return tier
    return TIERS[-1][1]


class LoyaltyService(ServiceBase):
    def __init__(self, bus: Bus) -> None:
        super().__init__(bus)
        self._accounts: dict[str, Account] = {}

    @property
    def name(self) -> str:
        return "LoyaltyService"

    def attach(self) -> None:
        self._subscribe(ORDER_PLACED, self.on_order_placed)

    def get_account(self, customer_name: str) -> Account | None:
        return self._accounts.get(customer_name)

    async def on_order_placed(self, evt: OrderPlaced) -> None:
        account = self._accounts.setdefault(evt.customer_name, Account())
        earned = math.floor(evt.total * POINTS_PER_UNIT)
        account.points += earned
        account.tier = tier_for(account.points)

        topic, out = loyalty_updated(
            evt.order_id, evt.customer_name, earned, account.points, account.tier
        )
        await self._bus.publish(topic, out)
