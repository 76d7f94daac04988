"""Inventory service: deducts ingredient stock for each order."""

from __future__ import annotations

from servicebus.core.constants import LOW_STOCK_THRESHOLD, ORDER_PLACED
from servicebus.dispatch.bus import Bus
from servicebus.events import OrderPlaced, inventory_updated
from servicebus.services.base import ServiceBase


class InventoryService(ServiceBase):
    def __init__(self, bus: Bus, stock: dict[str, int]) -> None:
        super().__init__(bus)
        self._stock = dict(stock)

    @property
    def name(self) -> str:
        return "InventoryService"

    def attach(self) -> None:
        self._subscribe(ORDER_PLACED, self.on_order_placed)

    def get_stock(self) -> dict[str, int]:
        return dict(self._stock)

    def low_stock(self, threshold: int = LOW_STOCK_THRESHOLD) -> list[str]:
        return [name for name, qty in self._stock.items() if qty < threshold]

    async def on_order_placed(self, evt: OrderPlaced) -> None:
        # Unknown ingredients are not tracked here and are skipped.
        deductions: dict[str, int] = {}
        for item in evt.items:
            if item.ingredient and item.ingredient in self._stock:
                self._stock[item.ingredient] -= item.ingredient_qty or 1
                deductions[item.ingredient] = self._stock[item.ingredient]

        topic, out = inventory_updated(evt.order_id, deductions, self._stock)
        await self._bus.publish(topic, out)
