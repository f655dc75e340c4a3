"""Configuration management for the finance tracker.

This module centralizes all configuration values including paths,
calculation modes, and environment variable overrides.  Tunable
defaults that are not paths (budget bands) live in JSON files under
``finance_tracker/defaults`` and are read with :func:`load_config`.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

# Base project root - assumes this file is in finance_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DEFAULTS_DIR = Path(__file__).parent / "defaults"

# Data directories
DATA_DIR = Path(os.getenv("FINTRACK_DATA_DIR", _PROJECT_ROOT / "data"))

# Database
DB_PATH = Path(
    os.getenv("FINTRACK_DB_PATH", DATA_DIR / "finance_tracker.db")
).resolve()

# Month range used to filter income/expenses: 'legacy' keeps the day-31
# upper bound of stored history, 'calendar' stops at the true last day.
MONTH_RANGE_MODES = ("legacy", "calendar")
MONTH_RANGE_MODE = os.getenv("FINTRACK_MONTH_RANGE", "legacy").strip().lower()

# Goal horizon: 'flat30' divides days by 30, 'calendar' counts whole months.
GOAL_MONTH_MODES = ("flat30", "calendar")
GOAL_MONTH_MODE = os.getenv("FINTRACK_GOAL_MONTHS", "flat30").strip().lower()

CURRENCY_SYMBOL = os.getenv("FINTRACK_CURRENCY", "₹")

LOG_LEVEL = os.getenv("FINTRACK_LOG_LEVEL", "INFO").upper()


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)


def get_db_path() -> str:
    """Get the database path as a string."""
    return str(DB_PATH)


def resolve_mode(value: Optional[str], allowed: tuple, default: str) -> str:
    """Return a validated calculation mode, falling back to ``default``.

    Raises:
        ValueError: If ``value`` (or the default) is not one of ``allowed``
    """
    mode = (value or default).strip().lower()
    if mode not in allowed:
        raise ValueError(f"Unknown mode {mode!r}; expected one of {', '.join(allowed)}")
    return mode


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for scripts and the dashboard."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_config(config_name: str) -> Dict[str, Any]:
    """Load a JSON defaults file by name.

    Args:
        config_name: Name of the config file (without .json extension)

    Returns:
        Dictionary containing the configuration

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        json.JSONDecodeError: If the configuration file is invalid JSON

    Example:
        >>> load_config('budget')['bands']['Needs']['target_low']
        55
    """
    config_path = DEFAULTS_DIR / f"{config_name}.json"

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def get_config_value(config_name: str, *keys: str, default: Any = None) -> Any:
    """Get a nested configuration value by key path.

    Example:
        >>> get_config_value('budget', 'bands', 'Wants', 'target_high')
        20
    """
    try:
        value = load_config(config_name)
        for key in keys:
            value = value[key]
        return value
    except (KeyError, FileNotFoundError):
        return default
