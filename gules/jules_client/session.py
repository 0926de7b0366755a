"""HTTP session factory for Jules API calls."""

from __future__ import annotations

import requests
from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import HTTP_POOL_CONNECTIONS, HTTP_POOL_MAXSIZE

__all__ = ["create_default_session", "get_default_session"]


def _build_retry() -> Retry:
    # 429 and 5xx are retried by ResourceAPI with its own backoff; the adapter
    # only covers connection-level failures.
    return Retry(
        total=3,
        connect=3,
        read=0,
        status=0,
        backoff_factor=0.5,
        allowed_methods=["GET"],
    )


def create_default_session() -> Session:
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=HTTP_POOL_CONNECTIONS,
        pool_maxsize=HTTP_POOL_MAXSIZE,
        max_retries=_build_retry(),
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update(
        {
            "Accept-Encoding": "gzip, deflate",
            "Accept": "application/json",
        }
    )
    return session


_DEFAULT_SESSION: Session | None = None


def get_default_session() -> Session:
    """Return the shared default Jules session, creating it on first use."""

    global _DEFAULT_SESSION
    if _DEFAULT_SESSION is None:
        _DEFAULT_SESSION = create_default_session()
    return _DEFAULT_SESSION
