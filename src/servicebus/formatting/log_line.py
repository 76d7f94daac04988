"""One line per envelope: time, icon, topic, publishing service."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from datetime import datetime

from servicebus.core.constants import (
    DEFAULT_LOG_DISPLAY_LIMIT,
    INVENTORY_UPDATED,
    LOYALTY_UPDATED,
    NOTIFICATION_SENT,
    ORDER_PLACED,
)
from servicebus.events import Envelope

EVENT_ICONS: dict[str, str] = {
    ORDER_PLACED: "🛒",
    INVENTORY_UPDATED: "📦",
    LOYALTY_UPDATED: "⭐",
    NOTIFICATION_SENT: "📨",
}
DEFAULT_ICON = "📡"
NO_SERVICE = "—"


def format_time(ts: float) -> str:
    """Local wall-clock time, HH:MM:SS."""
    return datetime.fromtimestamp(ts).strftime("%H:%M:%S")


def _service_of(payload: object) -> str:
    if isinstance(payload, dict):
        svc = payload.get("service")
    else:
        svc = getattr(payload, "service", None)
    return str(svc) if svc else NO_SERVICE


def format_envelope(envelope: Envelope) -> str:
    """Render e.g. ``12:00:01 #3 🛒 order.placed [OrderService]``."""
    icon = EVENT_ICONS.get(envelope.topic, DEFAULT_ICON)
    return (
        f"{format_time(envelope.created_at)} #{envelope.sequence} "
        f"{icon} {envelope.topic} [{_service_of(envelope.payload)}]"
    )


class LogDisplay:
    """Log observer keeping the newest ``limit`` rendered lines.

    Attach with ``bus.log.add_observer(display)``. ``sink`` receives each
    line as it is rendered, i.e. when dispatch of that envelope begins.
    """

    def __init__(
        self,
        limit: int = DEFAULT_LOG_DISPLAY_LIMIT,
        sink: Callable[[str], None] | None = None,
    ) -> None:
        self._lines: deque[str] = deque(maxlen=limit)
        self._sink = sink

    def __call__(self, envelope: Envelope) -> None:
        line = format_envelope(envelope)
        self._lines.append(line)
        if self._sink is not None:
            self._sink(line)

    @property
    def lines(self) -> list[str]:
        """Newest first, as the log panel shows them."""
        return list(reversed(self._lines))

    def clear(self) -> None:
        self._lines.clear()
