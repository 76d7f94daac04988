"""Reading the bus config file and its companion .env."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

# Points at a .env file to load instead of the one beside the config file.
ENV_FILE_VAR = "SERVICEBUS_ENV_FILE"


def _deep_update(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_update(current, value)
        else:
            merged[key] = value
    return merged


def load_config(path: str | Path) -> dict[str, Any]:
    """Parse the YAML config at path.

    A missing file or a document that is not a mapping yields ``{}`` so the
    bus runs on defaults. Malformed YAML is logged and re-raised.
    """
    path = Path(path)
    if not path.is_file():
        logger.warning("No bus config at {}; using defaults", path)
        return {}

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        logger.error("Bus config {} is not valid YAML: {}", path, exc)
        raise

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "Bus config {} must be a mapping, got {}; using defaults",
            path,
            type(data).__name__,
        )
        return {}
    logger.debug("Bus config {} read ({} keys)", path, len(data))
    return data


def _env_file_for(path: Path) -> Path:
    override = os.environ.get(ENV_FILE_VAR)
    if override:
        return Path(override)
    return path.parent / ".env"


def load_config_with_env(path: str | Path) -> dict[str, Any]:
    """Load the .env that belongs to this config, then the config itself.

    Variables already set in the process win over the .env file, so
    ``SERVICEBUS_*`` overrides from the shell still apply.
    """
    from dotenv import load_dotenv

    path = Path(path)
    env_file = _env_file_for(path)
    if env_file.is_file():
        load_dotenv(env_file, override=False)
        logger.debug("Loaded environment from {}", env_file)
    return load_config(path)
