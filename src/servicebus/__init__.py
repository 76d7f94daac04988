"""In-process service bus with sequential, depth-first cascading dispatch."""

from servicebus.core.errors import BusError, HandlerFailure
from servicebus.dispatch import Bus, DeliveryLog, Subscription, SubscriptionRegistry
from servicebus.events import Envelope, Handler

__version__ = "0.1.0"

__all__ = [
    "Bus",
    "BusError",
    "DeliveryLog",
    "Envelope",
    "Handler",
    "HandlerFailure",
    "Subscription",
    "SubscriptionRegistry",
    "__version__",
]
