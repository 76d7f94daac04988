"""Demo services that communicate only through the bus."""

from servicebus.dispatch.bus import Bus
from servicebus.services.base import ServiceBase
from servicebus.services.inventory import InventoryService
from servicebus.services.loyalty import LoyaltyService
from servicebus.services.notifications import NotificationService
from servicebus.services.orders import CATALOG, OrderService, pick_items

__all__ = [
    "CATALOG",
    "InventoryService",
    "LoyaltyService",
    "NotificationService",
    "OrderService",
    "ServiceBase",
    "Services",
    "pick_items",
    "register_services",
]


class Services:
    """The four demo services sharing one bus."""

    def __init__(
        self,
        orders: OrderService,
        inventory: InventoryService,
        loyalty: LoyaltyService,
        notifications: NotificationService,
    ) -> None:
        self.orders = orders
        self.inventory = inventory
        self.loyalty = loyalty
        self.notifications = notifications


def register_services(bus: Bus, stock: dict[str, int], *, rng=None) -> Services:
    """Build the services and attach consumers in dispatch order."""
    services = Services(
        orders=OrderService(bus, rng),
        inventory=InventoryService(bus, stock),
        loyalty=LoyaltyService(bus),
        notifications=NotificationService(bus),
    )
    for svc in (services.inventory, services.loyalty, services.notifications):
        svc.attach()
    return services
