"""Application configuration loaded from environment variables."""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _optional_seconds(name: str, default: str = "") -> Optional[float]:
    """Read a duration in seconds; an empty value means no timeout."""
    raw = os.getenv(name, default).strip()
    return float(raw) if raw else None


# Credentials (CLI only)
PINTEREST_EMAIL = os.getenv("PINTEREST_EMAIL")
PINTEREST_PASSWORD = os.getenv("PINTEREST_PASSWORD")

# Login service
SESSION_MANAGER_HOST = os.getenv("SESSION_MANAGER_HOST", "127.0.0.1")
SESSION_MANAGER_PORT = int(os.getenv("SESSION_MANAGER_PORT", "8025"))
SESSION_MANAGER_URL = f"http://{SESSION_MANAGER_HOST}:{SESSION_MANAGER_PORT}"
MAX_CONCURRENT_LOGINS = int(os.getenv("MAX_CONCURRENT_LOGINS", "2"))

# Browser
BROWSER_HEADLESS = os.getenv("BROWSER_HEADLESS", "true").lower() == "true"
BROWSER_REQUEST_TIMEOUT = _optional_seconds("BROWSER_REQUEST_TIMEOUT", "5")
BROWSER_LAUNCH_TIMEOUT = _optional_seconds("BROWSER_LAUNCH_TIMEOUT")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
