"""Service bus domain exceptions."""

from __future__ import annotations

from typing import Any


class BusError(Exception):
    """Base for service bus domain errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class HandlerFailure(BusError):
    """A subscribed handler raised, directly or somewhere in its nested cascade."""

    def __init__(
        self,
        topic: str,
        sequence: int,
        handler: Any,
        original_error: BaseException,
        *,
        code: str = "handler_failed",
    ) -> None:
        name = getattr(handler, "__qualname__", None) or repr(handler)
        super().__init__(
            f"handler {name} failed on {topic!r} (seq {sequence}): {original_error}",
            code=code,
            details={"topic": topic, "sequence": sequence, "handler": name},
            original_error=original_error,
        )
        self.topic = topic
        self.sequence = sequence
        self.handler = handler

    @property
    def root_cause(self) -> BaseException:
        """Innermost error that started the failure chain."""
        err: BaseException = self
        while isinstance(err, BusError) and err.original_error is not None:
            err = err.original_error
        return err


class HandlerTimeoutError(HandlerFailure):
    """Handler did not settle within the configured timeout."""

    def __init__(
        self, topic: str, sequence: int, handler: Any, timeout: float
    ) -> None:
        super().__init__(
            topic,
            sequence,
            handler,
            TimeoutError(f"handler did not settle within {timeout}s"),
            code="handler_timeout",
        )
        self.timeout = timeout


class CascadeDepthError(BusError):
    """Publish would nest deeper than the configured cascade limit."""


class ConfigurationError(BusError):
    """Config validation or load failure."""
