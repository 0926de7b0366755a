"""Activities endpoints: paginated listing and single-activity lookup."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from ..config import ACTIVITIES_PAGE_SIZE, JULES_API_URL
from ..errors import JulesAPIError
from ..models import Activity, ActivityPage
from .resources import ResourceAPI

LOGGER = logging.getLogger(__name__)


def _segment(value: str) -> str:
    return quote(value, safe="")


class ActivitiesAPI:
    def __init__(self, resources: ResourceAPI, *, base_url: str = JULES_API_URL) -> None:
        self._resources = resources
        self._base_url = base_url.rstrip("/")

    def list_activities(
        self,
        session_id: str,
        page_size: int = ACTIVITIES_PAGE_SIZE,
        page_token: Optional[str] = None,
    ) -> ActivityPage:
        """Return one page of ``session_id``'s activities."""

        url = f"{self._base_url}/sessions/{_segment(session_id)}/activities"
        params: Dict[str, Any] = {"pageSize": page_size}
        if page_token:
            params["pageToken"] = page_token
        context = f"list activities session={session_id}"
        data = self._resources.get_json(url, params, context)
        try:
            page = ActivityPage.from_payload(data)
        except ValueError as exc:
            message = f"{context} returned an unexpected payload: {exc}"
            LOGGER.error(message)
            raise JulesAPIError(message) from exc
        LOGGER.debug(
            "Fetched activities session=%s entries=%s has_next=%s",
            session_id,
            len(page.activities),
            page.next_page_token is not None,
        )
        return page

    def get_activity(self, session_id: str, activity_id: str) -> Activity:
        url = (
            f"{self._base_url}/sessions/{_segment(session_id)}"
            f"/activities/{_segment(activity_id)}"
        )
        context = f"get activity session={session_id} activity={activity_id}"
        data = self._resources.get_json(url, None, context)
        try:
            return Activity.from_payload(data)
        except ValueError as exc:
            message = f"{context} returned an unexpected payload: {exc}"
            LOGGER.error(message)
            raise JulesAPIError(message) from exc
