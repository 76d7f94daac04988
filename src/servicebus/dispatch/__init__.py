"""Dispatch: subscription registry, delivery log, event bus."""

from servicebus.dispatch.bus import Bus
from servicebus.dispatch.latency import FixedDelay, from_milliseconds, no_delay
from servicebus.dispatch.log import DeliveryLog
from servicebus.dispatch.registry import Subscription, SubscriptionRegistry

__all__ = [
    "Bus",
    "DeliveryLog",
    "FixedDelay",
    "Subscription",
    "SubscriptionRegistry",
    "from_milliseconds",
    "no_delay",
]
