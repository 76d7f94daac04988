"""Delivery log: append-only, sequenced record of every publish."""

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from typing import Any

from loguru import logger

from servicebus.events import Envelope

LogObserver = Callable[[Envelope], None]


class DeliveryLog:
    """Ordered history of envelopes.

    ``retention`` bounds how many envelopes stay in memory; it never affects
    sequence numbers, which keep counting from 1 for the life of the log.
    Observers run synchronously inside ``append`` so they see a message the
    moment its dispatch starts.
    """

    def __init__(
        self,
        retention: int | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if retention is not None and retention < 1:
            raise ValueError("retention must be positive")
        self._entries: deque[Envelope] = deque(maxlen=retention)
        self._observers: list[LogObserver] = []
        self._last_sequence = 0
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def retention(self) -> int | None:
        return self._entries.maxlen

    @property
    def last_sequence(self) -> int:
        """Most recently allocated sequence number (0 before any record)."""
        return self._last_sequence

    def record(self, topic: str, payload: Any) -> Envelope:
        """Allocate the next sequence number, build the envelope and append it."""
        with self._lock:
            self._last_sequence += 1
            envelope = Envelope(
                topic=topic,
                payload=payload,
                sequence=self._last_sequence,
                created_at=self._clock(),
            )
            self._entries.append(envelope)
            observers = list(self._observers)
        self._notify(observers, envelope)
        return envelope

    def append(self, envelope: Envelope) -> None:
        """Append a pre-built envelope; its sequence must be exactly the next one."""
        with self._lock:
            if envelope.sequence != self._last_sequence + 1:
                raise ValueError(
                    f"sequence {envelope.sequence} does not directly follow {self._last_sequence}"
                )
            self._last_sequence = envelope.sequence
            self._entries.append(envelope)
            observers = list(self._observers)
        self._notify(observers, envelope)

    def entries(self) -> tuple[Envelope, ...]:
        """Read-only snapshot of retained envelopes, oldest first."""
        with self._lock:
            return tuple(self._entries)

    def tail(self, k: int) -> tuple[Envelope, ...]:
        """Most recent ``k`` envelopes, oldest first."""
        if k <= 0:
            return ()
        with self._lock:
            return tuple(self._entries)[-k:]

    def add_observer(self, observer: LogObserver) -> None:
        with self._lock:
            self._observers.append(observer)

    def remove_observer(self, observer: LogObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _notify(self, observers: list[LogObserver], envelope: Envelope) -> None:
        for observer in observers:
            try:
                observer(envelope)
            except Exception as exc:
                logger.exception("Log observer {} failed: {}", observer, exc)
