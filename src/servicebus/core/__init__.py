"""Core: domain errors and constants."""

from servicebus.core.errors import (
    BusError,
    CascadeDepthError,
    ConfigurationError,
    HandlerFailure,
    HandlerTimeoutError,
)

__all__ = [
    "BusError",
    "CascadeDepthError",
    "ConfigurationError",
    "HandlerFailure",
    "HandlerTimeoutError",
]
