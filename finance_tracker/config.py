"""Configuration management for the finance tracker.

This module centralizes all configuration values including the REST
service location, request timeout, client-state paths and environment
variable overrides.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path

from .logger import get_logger

logger = get_logger(__name__)

# Base project root - assumes this file is in finance_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DEFAULT_API_URL = "http://localhost:8080/api"
DEFAULT_TIMEOUT_SECONDS = 10.0


def _parse_env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s='%s', using default %.1f.", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Non-positive %s='%s', using default %.1f.", name, raw, default)
        return default
    return value


# REST service
API_BASE_URL = os.getenv("FINANCE_TRACKER_API_URL", DEFAULT_API_URL).rstrip("/")
REQUEST_TIMEOUT = _parse_env_float("FINANCE_TRACKER_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)

# Data directories
DATA_DIR = Path(os.getenv("FINANCE_TRACKER_DATA_DIR", _PROJECT_ROOT / "data"))

# Client-local state (filters, budgets, dark mode)
STATE_PATH = Path(
    os.getenv("FINANCE_TRACKER_STATE_PATH", DATA_DIR / "client_state.json")
).resolve()


def default_month() -> str:
    """Month the dashboard opens on when no preference is stored."""
    configured = os.getenv("FINANCE_TRACKER_DEFAULT_MONTH", "").strip()
    if len(configured) == 7 and configured[4] == "-":
        return configured
    return date.today().strftime("%Y-%m")


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, STATE_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)
