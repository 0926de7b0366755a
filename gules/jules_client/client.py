"""Facade bundling the Jules HTTP session, API key, and endpoint helpers."""

from __future__ import annotations

from typing import Optional

import requests

from ..config import ACTIVITIES_PAGE_SIZE, JULES_API_URL, REQUEST_TIMEOUT
from ..models import Activity, ActivityPage
from .activities import ActivitiesAPI
from .base import resolve_api_key
from .resources import ResourceAPI
from .session import get_default_session


class JulesClient:
    """Minimal Jules REST client; satisfies the activity cache's source protocol."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: str = JULES_API_URL,
        session: requests.Session | None = None,
        timeout: int = REQUEST_TIMEOUT,
    ) -> None:
        self._session = session or get_default_session()
        self._resources = ResourceAPI(
            resolve_api_key(api_key),
            session=self._session,
            timeout=timeout,
        )
        self._activities = ActivitiesAPI(self._resources, base_url=base_url)

    def list_activities(
        self,
        session_id: str,
        page_size: int = ACTIVITIES_PAGE_SIZE,
        page_token: Optional[str] = None,
    ) -> ActivityPage:
        return self._activities.list_activities(
            session_id, page_size=page_size, page_token=page_token
        )

    def get_activity(self, session_id: str, activity_id: str) -> Activity:
        return self._activities.get_activity(session_id, activity_id)
