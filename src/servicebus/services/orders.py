"""Order service: accepts orders and announces them on the bus."""

from __future__ import annotations

import random
from dataclasses import dataclass

from loguru import logger

from servicebus.dispatch.bus import Bus
from servicebus.events import MenuItem, order_placed
from servicebus.services.base import ServiceBase

CATALOG: tuple[MenuItem, ...] = (
    MenuItem("Flat White", 5.00, "Espresso Beans", 2),
    MenuItem("Brown Sugar Latte", 5.75, "Brown Sugar Syrup", 1),
    MenuItem("Oat Milk Add-on", 0.75, "Oat Milk", 1),
    MenuItem("Matcha Latte", 4.75, "Matcha Powder", 2),
    MenuItem("Pour Over", 4.25, "Espresso Beans", 3),
)


@dataclass
class Order:
    order_id: str
    customer_name: str
    items: list[MenuItem]
    total: float
    status: str = "placed"


def pick_items(rng: random.Random, catalog: tuple[MenuItem, ...] = CATALOG) -> list[MenuItem]:
    """One or two random catalog items."""
    count = rng.randint(1, 2)
    return [rng.choice(catalog) for _ in range(count)]


class OrderService(ServiceBase):
    """Receives orders; publishes order.placed and waits for the full cascade."""

    def __init__(self, bus: Bus, rng: random.Random | None = None) -> None:
        super().__init__(bus)
        self._rng = rng or random.Random()
        self._orders: dict[str, Order] = {}

    @property
    def name(self) -> str:
        return "OrderService"

    def get_order(self, order_id: str) -> Order | None:
        return self._orders.get(order_id)

    async def place_order(self, items: list[MenuItem], customer_name: str) -> str:
        """Record the order and publish it. Raises HandlerFailure if any consumer fails."""
        if not items:
            raise ValueError("order must contain at least one item")
        order_id = self._new_order_id()
        topic, evt = order_placed(order_id, customer_name, items)
        self._orders[order_id] = Order(order_id, customer_name, list(items), evt.total)
        logger.info("Order {} placed for {} ({:.2f})", order_id, customer_name, evt.total)
        await self._bus.publish(topic, evt)
        return order_id

    def _new_order_id(self) -> str:
        while True:
            order_id = f"ORD-{self._rng.randint(1000, 9999)}"
            if order_id not in self._orders:
                return order_id
