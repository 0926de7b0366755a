"""Shared Jules client helpers (API key resolution, headers)."""

from __future__ import annotations

from typing import Dict, Optional

from .. import config
from ..errors import JulesAuthError


def resolve_api_key(explicit: Optional[str] = None) -> str:
    """Return the API key from the argument or ``JULES_API_KEY``."""

    key = explicit or config.JULES_API_KEY
    if not key:
        raise JulesAuthError(
            "Jules API key not found. Pass --api-key or set JULES_API_KEY "
            "(environment or .env). Keys are issued at https://jules.google.com/settings"
        )
    return key


def auth_headers(api_key: str) -> Dict[str, str]:
    return {"X-Goog-Api-Key": api_key}
