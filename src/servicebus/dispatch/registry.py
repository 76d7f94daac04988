"""Subscription registry: topic -> handlers in registration order."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field

from loguru import logger

from servicebus.events import Handler


@dataclass(eq=False)
class Subscription:
    """Handle returned by subscribe; cancel() removes this one registration."""

    topic: str
    handler: Handler
    order: int
    _registry: SubscriptionRegistry | None = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return self._registry is not None

    def cancel(self) -> bool:
        """Remove the registration. Returns False if already cancelled."""
        registry, self._registry = self._registry, None
        if registry is None:
            return False
        return registry.unsubscribe(self)


class SubscriptionRegistry:
    """Ordered handler lists per topic. Same handler may be registered twice."""

    def __init__(self) -> None:
        self._subs: dict[str, list[Subscription]] = {}
        self._order = itertools.count()
        self._lock = threading.Lock()

    def subscribe(self, topic: str, handler: Handler) -> Subscription:
        """Append handler to topic's list and return a cancellable handle."""
        if not callable(handler):
            raise TypeError("handler must be callable")
        with self._lock:
            sub = Subscription(topic, handler, next(self._order), self)
            self._subs.setdefault(topic, []).append(sub)
        logger.debug("Subscribed {} to {}", _handler_name(handler), topic)
        return sub

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove one registration. Unknown handles are ignored."""
        with self._lock:
            subs = self._subs.get(subscription.topic)
            if not subs or subscription not in subs:
                return False
            subs.remove(subscription)
            if not subs:
                del self._subs[subscription.topic]
        subscription._registry = None
        return True

    def handlers_for(self, topic: str) -> tuple[Handler, ...]:
        """Snapshot of handlers for topic; empty for unknown topics."""
        with self._lock:
            return tuple(sub.handler for sub in self._subs.get(topic, ()))

    def subscriptions(self, topic: str) -> tuple[Subscription, ...]:
        with self._lock:
            return tuple(self._subs.get(topic, ()))

    def topics(self) -> list[str]:
        with self._lock:
            return list(self._subs)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(subs) for subs in self._subs.values())


def _handler_name(handler: object) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)
