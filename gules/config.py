"""Central configuration for the gules Jules client and activity cache.

All values are constants imported by the rest of the package. Secrets and
paths are read from environment variables (optionally via a local ``.env``).
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _default_cache_dir() -> Path:
    xdg = os.getenv("XDG_CACHE_HOME")
    base = Path(xdg) if xdg else Path.home() / ".cache"
    return base / "gules" / "activities"


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Jules API settings
# ---------------------------------------------------------------------------
JULES_API_URL = os.getenv("JULES_API_URL", "https://jules.googleapis.com/v1alpha")

# API key pulled from the environment. Do not hardcode secrets.
JULES_API_KEY = os.getenv("JULES_API_KEY", "")

# Request timeout in seconds.
REQUEST_TIMEOUT = _env_int("REQUEST_TIMEOUT", 30)

# HTTP session pool sizes.
HTTP_POOL_CONNECTIONS = 10
HTTP_POOL_MAXSIZE = 10

# Retry/backoff behaviour for the Jules fetch loops.
# JULES_MAX_RETRIES covers network failures, 429, 5xx, or bad payloads.
JULES_MAX_RETRIES = _env_int("JULES_MAX_RETRIES", 3)
# JULES_BACKOFF_MAX_SECONDS caps the exponential backoff per attempt.
JULES_BACKOFF_MAX_SECONDS = _env_float("JULES_BACKOFF_MAX_SECONDS", 4.0)


# ---------------------------------------------------------------------------
# Activity cache
# ---------------------------------------------------------------------------
# Read activities through the local cache. Disable to always fetch live.
ACTIVITY_CACHE_ENABLED = _env_bool("ACTIVITY_CACHE_ENABLED", True)

# Sessions kept on disk before the oldest-touched one is evicted.
ACTIVITY_CACHE_MAX_SESSIONS = _env_int("ACTIVITY_CACHE_MAX_SESSIONS", 50)

# Directory (absolute or relative) holding metadata.json and one file per session.
ACTIVITY_CACHE_DIR = os.getenv("ACTIVITY_CACHE_DIR", str(_default_cache_dir()))

# Page size used for every list-activities request.
ACTIVITIES_PAGE_SIZE = _env_int("ACTIVITIES_PAGE_SIZE", 50)

# Ceiling on activities accumulated by a cold-start full fetch.
MAX_ACTIVITIES_TO_FETCH = _env_int("MAX_ACTIVITIES_TO_FETCH", 100)
