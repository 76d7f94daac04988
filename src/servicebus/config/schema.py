"""Config schema and accessor."""

from __future__ import annotations

import copy
import os
from typing import Any

from loguru import logger

from servicebus.config.loader import _deep_update
from servicebus.core.constants import DEFAULT_LATENCY_MS, DEFAULT_LOG_DISPLAY_LIMIT
from servicebus.core.errors import ConfigurationError

DEFAULTS: dict[str, Any] = {
    "latency_ms": DEFAULT_LATENCY_MS,
    "log_display_limit": DEFAULT_LOG_DISPLAY_LIMIT,
    "log_retention": None,
    "max_cascade_depth": None,
    "handler_timeout_seconds": None,
    "serialize_publishes": False,
    "stock": {
        "Espresso Beans": 240,
        "Oat Milk": 18,
        "Brown Sugar Syrup": 12,
        "Matcha Powder": 8,
    },
}

# Env keys that override config (loaded once per reload)
_ENV_OVERRIDE_KEYS = (
    "SERVICEBUS_LATENCY_MS",
    "SERVICEBUS_SERIALIZE",
)


def _load_env_overrides() -> dict[str, str]:
    return {k: os.environ.get(k, "") for k in _ENV_OVERRIDE_KEYS}


def _parse_bool_env(val: str) -> bool | None:
    """Parse env string to bool; None if not a recognized bool."""
    v = val.lower()
    if v in ("1", "true", "yes"):
        return True
    if v in ("0", "false", "no"):
        return False
    return None


def _optional_number(data: dict[str, Any], key: str, *, integer: bool) -> None:
    val = data.get(key)
    if val is None:
        return
    allowed = (int,) if integer else (int, float)
    if isinstance(val, bool) or not isinstance(val, allowed):
        raise ConfigurationError(
            f"{key} must be a number or null",
            code="invalid_type",
            details={"key": key, "type": type(val).__name__},
        )
    if val <= 0:
        raise ConfigurationError(
            f"{key} must be positive",
            code="invalid_value",
            details={"key": key, "value": val},
        )


class Config:
    """Config accessor with attribute-style access; missing keys fall back to DEFAULTS."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = _deep_update(copy.deepcopy(DEFAULTS), data or {})
        self._env: dict[str, str] = _load_env_overrides()

    def reload(self, data: dict[str, Any], *, validate: bool = True) -> None:
        """Replace config data."""
        self._data = _deep_update(copy.deepcopy(DEFAULTS), data or {})
        self._env = _load_env_overrides()
        if validate:
            self._validate()
        logger.debug("Config reloaded: latency {}ms", self.latency_ms)

    def _validate(self) -> None:
        """Raise ConfigurationError on wrong types or out-of-range values."""
        latency = self._data.get("latency_ms")
        if isinstance(latency, bool) or not isinstance(latency, (int, float)) or latency < 0:
            raise ConfigurationError(
                "latency_ms must be a non-negative number",
                code="invalid_latency",
                details={"value": latency},
            )
        limit = self._data.get("log_display_limit")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ConfigurationError(
                "log_display_limit must be a positive integer",
                code="invalid_display_limit",
                details={"value": limit},
            )
        _optional_number(self._data, "log_retention", integer=True)
        _optional_number(self._data, "max_cascade_depth", integer=True)
        _optional_number(self._data, "handler_timeout_seconds", integer=False)

        stock = self._data.get("stock")
        if not isinstance(stock, dict):
            raise ConfigurationError(
                "stock must be a mapping",
                code="invalid_stock",
                details={"type": type(stock).__name__},
            )
        for name, qty in stock.items():
            if isinstance(qty, bool) or not isinstance(qty, int):
                raise ConfigurationError(
                    f"stock[{name!r}] must be an integer",
                    code="invalid_stock_item",
                    details={"ingredient": name},
                )

    @property
    def raw(self) -> dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Get value by dot-separated path (e.g. 'stock.Oat Milk')."""
        parts = key.split(".")
        obj: Any = self._data
        for part in parts:
            if isinstance(obj, dict) and part in obj:
                obj = obj[part]
            else:
                return default
        return obj

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    @property
    def latency_ms(self) -> float:
        """Simulated inter-service latency before each handler call."""
        env_val = self._env.get("SERVICEBUS_LATENCY_MS", "")
        if env_val:
            try:
                return max(0.0, float(env_val))
            except ValueError:
                logger.warning("Ignoring SERVICEBUS_LATENCY_MS={!r}", env_val)
        return float(self._data.get("latency_ms", DEFAULT_LATENCY_MS))

    @property
    def log_display_limit(self) -> int:
        return int(self._data.get("log_display_limit", DEFAULT_LOG_DISPLAY_LIMIT))

    @property
    def log_retention(self) -> int | None:
        val = self._data.get("log_retention")
        return int(val) if val is not None else None

    @property
    def max_cascade_depth(self) -> int | None:
        val = self._data.get("max_cascade_depth")
        return int(val) if val is not None else None

    @property
    def handler_timeout_seconds(self) -> float | None:
        val = self._data.get("handler_timeout_seconds")
        return float(val) if val is not None else None

    @property
    def serialize_publishes(self) -> bool:
        parsed = _parse_bool_env(self._env.get("SERVICEBUS_SERIALIZE", ""))
        if parsed is not None:
            return parsed
        return bool(self._data.get("serialize_publishes", False))

    @property
    def stock(self) -> dict[str, int]:
        val = self._data.get("stock")
        return {str(k): int(v) for k, v in val.items()} if isinstance(val, dict) else {}


cfg: Config = Config({})
