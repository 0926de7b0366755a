"""Generic JSON resource fetcher with retry/backoff."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import requests

from ..config import JULES_BACKOFF_MAX_SECONDS, JULES_MAX_RETRIES, REQUEST_TIMEOUT
from ..errors import JulesAPIError
from .base import auth_headers
from .response_handling import classify_response_status
from .session import get_default_session

LOGGER = logging.getLogger(__name__)


class ResourceAPI:
    """Encapsulates authenticated Jules GET requests with retries."""

    def __init__(
        self,
        api_key: str,
        *,
        session: requests.Session | None = None,
        timeout: int = REQUEST_TIMEOUT,
        max_retries: int = JULES_MAX_RETRIES,
    ) -> None:
        self._api_key = api_key
        self._session = session or get_default_session()
        self._timeout = timeout
        self._max_retries = max(1, max_retries)

    def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]],
        context: str,
    ) -> Any:
        backoff = 1.0
        attempt = 0
        while True:
            attempt += 1
            can_retry = attempt < self._max_retries
            try:
                response = self._session.get(
                    url,
                    headers=auth_headers(self._api_key),
                    params=params,
                    timeout=self._timeout,
                )
            except requests.RequestException as exc:
                if can_retry:
                    LOGGER.warning(
                        "%s network error attempt=%s err=%s; retrying in %.1fs",
                        context,
                        attempt,
                        exc.__class__.__name__,
                        backoff,
                    )
                    time.sleep(backoff)
                    backoff = min(backoff * 2, JULES_BACKOFF_MAX_SECONDS)
                    continue
                message = f"{context} network error: {exc.__class__.__name__}: {exc}"
                LOGGER.error(message)
                raise JulesAPIError(message) from exc

            action, error = classify_response_status(
                response,
                context,
                attempt=attempt,
                backoff=backoff,
                can_retry=can_retry,
            )
            if action == "retry":
                time.sleep(backoff)
                backoff = min(backoff * 2, JULES_BACKOFF_MAX_SECONDS)
                continue
            if action == "raise" and error is not None:
                raise error

            try:
                return response.json()
            except ValueError as exc:
                if can_retry:
                    LOGGER.warning(
                        "Non-JSON response for %s attempt=%s; retrying in %.1fs",
                        context,
                        attempt,
                        backoff,
                    )
                    time.sleep(backoff)
                    backoff = min(backoff * 2, JULES_BACKOFF_MAX_SECONDS)
                    continue
                message = f"{context} returned non-JSON payload"
                LOGGER.error(message)
                raise JulesAPIError(message) from exc
