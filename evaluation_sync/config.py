"""Configuration helpers for Evaluation Sync."""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

from dotenv import load_dotenv


class ConfigError(RuntimeError):
    """Raised when configuration values are invalid."""


DEFAULT_STORAGE_PREFIX = "eval_tracker_"


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the sync service."""

    storage_prefix: str = DEFAULT_STORAGE_PREFIX
    sync_interval_minutes: float = 5.0
    fetch_delay: float = 1.0
    push_delay: float = 0.5
    ping_delay: float = 2.0
    environment: str = "local"


def _read_float(var: str, default: float) -> float:
    raw = os.getenv(var)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{var} must be a number, got {raw!r}.") from exc
    if value < 0:
        raise ConfigError(f"{var} must not be negative, got {raw!r}.")
    return value


def load_settings(*, dotenv_path: Optional[str] = None) -> Settings:
    """Load settings from environment variables.

    Args:
        dotenv_path: Optional .env file to load before reading the environment.

    Returns:
        Settings with the resolved values.

    Raises:
        ConfigError: if a numeric value cannot be parsed.
    """

    load_dotenv(dotenv_path)

    prefix = os.getenv("EVAL_SYNC_STORAGE_PREFIX", DEFAULT_STORAGE_PREFIX).strip()
    if not prefix:
        raise ConfigError("EVAL_SYNC_STORAGE_PREFIX must not be empty.")

    interval = _read_float("EVAL_SYNC_INTERVAL_MINUTES", 5.0)
    if interval == 0:
        raise ConfigError("EVAL_SYNC_INTERVAL_MINUTES must be greater than zero.")

    return Settings(
        storage_prefix=prefix,
        sync_interval_minutes=interval,
        fetch_delay=_read_float("EVAL_SYNC_FETCH_DELAY", 1.0),
        push_delay=_read_float("EVAL_SYNC_PUSH_DELAY", 0.5),
        ping_delay=_read_float("EVAL_SYNC_PING_DELAY", 2.0),
        environment=os.getenv("EVAL_SYNC_ENV", "local"),
    )
