"""Configuration management for the camera access check."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

ENV_PATH = Path(__file__).parent / ".env"


def _load_env_file() -> dict[str, str]:
    """Load variables from the .env file if it exists."""
    if not ENV_PATH.exists():
        return {}
    return {key: value for key, value in dotenv_values(ENV_PATH).items() if value is not None}


# Load .env file on module import
_env_file_vars = _load_env_file()


def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable, checking .env file first, then system env."""
    return _env_file_vars.get(key) or os.environ.get(key) or default


def resolve_log_level(name: str, default: str = "INFO") -> str:
    """Return the upper-cased level name if logging knows it, else the default."""
    name = name.strip().upper()
    if isinstance(logging.getLevelName(name), int):
        return name
    return default


# Logging
LOG_LEVEL = resolve_log_level(get_env("LOG_LEVEL", "INFO"))
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"

# Capture smoke test
SESSION_DWELL_SECONDS = 2  # Keep the session running briefly to ensure it's active

# OpenCV fallback (non-macOS hosts)
OPENCV_CAMERA_INDEX = int(get_env("OPENCV_CAMERA_INDEX", "0"))
