"""Activity retrieval that reads through the local cache when enabled."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..activity_cache import ActivityCacheStore, ActivitySource, fetch_all_activities
from ..activity_types import ActivityTypeFilter, filter_activities
from ..models import Activity

LOGGER = logging.getLogger(__name__)


class ActivityService:
    """Fetch a session's activities, optionally via the cache, and filter them."""

    def __init__(
        self,
        source: ActivitySource,
        store: Optional[ActivityCacheStore] = None,
        *,
        cache_enabled: bool = True,
    ) -> None:
        self._source = source
        self._store = store
        self._cache_enabled = cache_enabled

    def get_activities(self, session_id: str, *, use_cache: bool = True) -> List[Activity]:
        """Return all known activities for ``session_id``, newest first."""

        store = self._store
        # The persisted config can switch the cache off as well.
        if use_cache and self._cache_enabled and store is not None and store.config.enabled:
            return store.get_or_refresh(session_id)
        LOGGER.debug("Cache bypassed for session=%s; fetching live", session_id)
        return fetch_all_activities(self._source, session_id)

    def filter(
        self,
        session_id: str,
        *,
        types: Sequence[ActivityTypeFilter] = (),
        bash_output_only: bool = False,
        last_n: Optional[int] = None,
        use_cache: bool = True,
    ) -> List[Activity]:
        activities = self.get_activities(session_id, use_cache=use_cache)
        selected = filter_activities(
            activities,
            types=types,
            bash_output_only=bash_output_only,
            last_n=last_n,
        )
        LOGGER.info(
            "Session %s: %s of %s activities matched",
            session_id,
            len(selected),
            len(activities),
        )
        return selected
