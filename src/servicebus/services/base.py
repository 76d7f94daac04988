"""Base service interface: bus injected, handlers registered in attach()."""

from __future__ import annotations

from abc import ABC, abstractmethod

from servicebus.dispatch.bus import Bus
from servicebus.dispatch.registry import Subscription


class ServiceBase(ABC):
    """A collaborator that talks to other services only through the bus."""

    def __init__(self, bus: Bus) -> None:
        self._bus = bus
        self._subscriptions: list[Subscription] = []

    @property
    @abstractmethod
    def name(self) -> str:
        """Service identifier shown in the delivery log (e.g. 'OrderService')."""
        ...

    def attach(self) -> None:
        """Register handlers on the bus. Override in services that consume events."""

    def detach(self) -> None:
        """Cancel every subscription made through _subscribe."""
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()

    def _subscribe(self, topic: str, handler) -> Subscription:
        sub = self._bus.subscribe(topic, handler)
        self._subscriptions.append(sub)
        return sub
