"""
Settings Module for gapslide

Persists user preferences (default board, gap configuration, wrap flags,
shuffle length, log level) as JSON in the data directory. Puzzle state
itself is never stored.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"

# Default settings
DEFAULT_SETTINGS: dict[str, Any] = {
    "board": "default",
    "gap_config": None,
    "wrap_horizontal": False,
    "wrap_vertical": False,
    "steps": 250,
    "log_level": "WARNING",
}


def settings_path(data_dir: Path) -> Path:
    return data_dir / SETTINGS_FILENAME


def load_settings(path: Path) -> dict[str, Any]:
    """
    Load settings from *path*.

    Returns:
        Settings dictionary merged over the defaults. Returns the defaults
        if the file is missing or invalid.
    """
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return DEFAULT_SETTINGS.copy()

    try:
        with open(path, "r", encoding="utf-8") as f:
            settings = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return DEFAULT_SETTINGS.copy()

    if not isinstance(settings, dict):
        logger.warning(f"Settings file {path} does not hold an object, using defaults")
        return DEFAULT_SETTINGS.copy()

    # Merge with defaults to handle missing keys
    result = DEFAULT_SETTINGS.copy()
    result.update({k: v for k, v in settings.items() if k in DEFAULT_SETTINGS})
    if not isinstance(result["steps"], int) or result["steps"] < 0:
        logger.warning(f"Ignoring invalid steps setting {result['steps']!r}")
        result["steps"] = DEFAULT_SETTINGS["steps"]
    logger.debug(f"Settings loaded: {result}")
    return result


def save_settings(settings: dict[str, Any], path: Path) -> None:
    """
    Save settings to *path*, creating the data directory if needed.

    Args:
        settings: Settings dictionary to save
        path: Destination file
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(settings, f, indent=2)
            f.write("\n")
        logger.debug(f"Settings saved: {settings}")
    except OSError as e:
        logger.error(f"Failed to save settings: {e}")
