"""Global pytest fixtures & helpers.

Adds project root to path and provides fake activity sources and cache stores
shared across test modules.
"""
from __future__ import annotations

import os
import sys
from typing import Dict, List, Optional, Tuple

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from gules.activity_cache import ActivityCacheStore, CacheConfig, MemoryStorage
from gules.models import Activity, ActivityPage


# --- Factory helpers -------------------------------------------------
def make_activity(activity_id, create_time, **extra) -> Activity:
    payload = {
        "name": f"sessions/s/activities/{activity_id}",
        "id": activity_id,
        "createTime": create_time,
        "originator": "agent",
    }
    payload.update(extra)
    return Activity.from_payload(payload)


class FakeSource:
    """Scripted activity source keyed by (session_id, page_token)."""

    def __init__(self, pages: Optional[Dict[Tuple[str, Optional[str]], ActivityPage]] = None):
        self.pages = dict(pages or {})
        self.calls: List[Tuple[str, int, Optional[str]]] = []
        self.error: Optional[Exception] = None

    def add(self, session_id, token, activities, next_token=None):
        self.pages[(session_id, token)] = ActivityPage(
            activities=list(activities), next_page_token=next_token
        )

    def list_activities(self, session_id, page_size=50, page_token=None):
        self.calls.append((session_id, page_size, page_token))
        if self.error is not None:
            raise self.error
        return self.pages.get(
            (session_id, page_token), ActivityPage(activities=[], next_page_token=None)
        )


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(memory_storage, source) -> ActivityCacheStore:
    return ActivityCacheStore(memory_storage, source)


@pytest.fixture
def make_store(memory_storage, source):
    def _make(max_sessions: int = 50, **kwargs) -> ActivityCacheStore:
        return ActivityCacheStore(
            memory_storage,
            source,
            config=CacheConfig(max_sessions=max_sessions),
            **kwargs,
        )

    return _make
