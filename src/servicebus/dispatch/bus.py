"""Event bus: sequential, depth-first dispatch with a delivery log."""

from __future__ import annotations

import asyncio
import contextvars
import inspect
import weakref
from collections.abc import Callable
from typing import Any

from loguru import logger

from servicebus.core.errors import CascadeDepthError, HandlerFailure, HandlerTimeoutError
from servicebus.dispatch.latency import DelayStrategy, no_delay
from servicebus.dispatch.log import DeliveryLog
from servicebus.dispatch.registry import Subscription, SubscriptionRegistry, _handler_name
from servicebus.events import Envelope, Handler

__all__ = ["Bus"]


class Bus:
    """In-process publish/subscribe bus.

    ``publish`` logs the message, then runs each handler for the topic in
    registration order, awaiting it (and every publish it makes) before the
    next one starts. The first handler failure stops the round and is raised
    to the caller as :class:`HandlerFailure`.

    Options, all off by default:

    * ``delay`` -- awaited before every handler call.
    * ``max_depth`` -- refuse publishes nested deeper than this; a top-level
      publish is depth 1.
    * ``handler_timeout`` -- seconds an async handler may take to settle.
    * ``serialize`` -- run independent top-level publishes one at a time.
      Nested publishes never wait on this lock.
    """

    def __init__(
        self,
        *,
        registry: SubscriptionRegistry | None = None,
        log: DeliveryLog | None = None,
        delay: DelayStrategy = no_delay,
        max_depth: int | None = None,
        handler_timeout: float | None = None,
        serialize: bool = False,
    ) -> None:
        if max_depth is not None and max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        if handler_timeout is not None and handler_timeout <= 0:
            raise ValueError("handler_timeout must be positive")
        self._registry = registry if registry is not None else SubscriptionRegistry()
        self._log = log if log is not None else DeliveryLog()
        self._delay = delay
        self._max_depth = max_depth
        self._handler_timeout = handler_timeout
        self._serialize = serialize
        # One lock per event loop; an asyncio.Lock is bound to the loop it first waits on.
        self._serial_locks: weakref.WeakKeyDictionary[
            asyncio.AbstractEventLoop, asyncio.Lock
        ] = weakref.WeakKeyDictionary()
        # Per-instance so a handler on one bus publishing to another is not
        # counted as nested on the second.
        self._depth: contextvars.ContextVar[int] = contextvars.ContextVar(
            f"servicebus_depth_{id(self)}", default=0
        )

    @property
    def registry(self) -> SubscriptionRegistry:
        return self._registry

    @property
    def log(self) -> DeliveryLog:
        return self._log

    @property
    def depth(self) -> int:
        """Cascade depth of the calling context (0 outside any dispatch)."""
        return self._depth.get()

    def subscribe(self, topic: str, handler: Handler) -> Subscription:
        """Register handler for topic. Returns a handle with cancel()."""
        return self._registry.subscribe(topic, handler)

    def unsubscribe(self, subscription: Subscription) -> bool:
        return subscription.cancel()

    def on(self, topic: str) -> Callable[[Handler], Handler]:
        """Decorator form of subscribe."""

        def decorator(handler: Handler) -> Handler:
            self.subscribe(topic, handler)
            return handler

        return decorator

    def entries(self) -> tuple[Envelope, ...]:
        """Delivery history, oldest first."""
        return self._log.entries()

    async def publish(self, topic: str, payload: Any = None) -> Envelope:
        """Log and dispatch; returns the envelope once the whole cascade settled."""
        if self._serialize and self._depth.get() == 0:
            async with self._serial_lock():
                return await self._dispatch(topic, payload)
        return await self._dispatch(topic, payload)

    def _serial_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        lock = self._serial_locks.get(loop)
        if lock is None:
            lock = self._serial_locks[loop] = asyncio.Lock()
        return lock

    def spawn(self, topic: str, payload: Any = None) -> asyncio.Task[Envelope]:
        """Start publish in a task. Cancelling the task cancels the cascade."""
        return asyncio.create_task(self.publish(topic, payload), name=f"publish:{topic}")

    async def _dispatch(self, topic: str, payload: Any) -> Envelope:
        depth = self._depth.get() + 1
        if self._max_depth is not None and depth > self._max_depth:
            raise CascadeDepthError(
                f"publish to {topic!r} exceeds cascade depth {self._max_depth}",
                code="cascade_depth",
                details={"topic": topic, "depth": depth, "max_depth": self._max_depth},
            )

        envelope = self._log.record(topic, payload)
        handlers = self._registry.handlers_for(topic)
        logger.debug(
            "Publish #{} {} (depth {}, {} handlers)",
            envelope.sequence,
            topic,
            depth,
            len(handlers),
        )

        token = self._depth.set(depth)
        try:
            for handler in handlers:
                await self._delay()
                await self._invoke(envelope, handler)
        finally:
            self._depth.reset(token)
        return envelope

    async def _invoke(self, envelope: Envelope, handler: Handler) -> None:
        scope: asyncio.Timeout | None = None
        try:
            result = handler(envelope.payload)
            if inspect.isawaitable(result):
                if self._handler_timeout is None:
                    await result
                else:
                    async with asyncio.timeout(self._handler_timeout) as scope:
                        await result
        except Exception as exc:
            if isinstance(exc, TimeoutError) and scope is not None and scope.expired():
                logger.warning(
                    "Handler {} timed out on #{} {}",
                    _handler_name(handler),
                    envelope.sequence,
                    envelope.topic,
                )
                raise HandlerTimeoutError(
                    envelope.topic, envelope.sequence, handler, self._handler_timeout
                ) from exc
            logger.warning(
                "Handler {} failed on #{} {}: {}",
                _handler_name(handler),
                envelope.sequence,
                envelope.topic,
                exc,
            )
            raise HandlerFailure(envelope.topic, envelope.sequence, handler, exc) from exc
