"""Tests for the cache-aware activity service."""

from __future__ import annotations

from conftest import make_activity
from gules.activity_cache import ActivityCacheStore, CacheConfig
from gules.activity_types import ActivityTypeFilter
from gules.services import ActivityService


def _seed(source) -> None:
    source.add(
        "s1",
        None,
        [
            make_activity("a", "2024-01-01T00:00:00Z", agentMessaged={"agentMessage": "x"}),
            make_activity("b", "2024-01-02T00:00:00Z", progressUpdated={}),
        ],
    )


def test_reads_through_cache(store, source, memory_storage) -> None:
    _seed(source)
    service = ActivityService(source, store)

    result = service.filter("s1", types=[ActivityTypeFilter.PROGRESS])

    assert [a.id for a in result] == ["b"]
    assert memory_storage.read("s1.json") is not None


def test_no_cache_fetches_live_without_writing(store, source, memory_storage) -> None:
    _seed(source)
    service = ActivityService(source, store)

    result = service.get_activities("s1", use_cache=False)

    assert [a.id for a in result] == ["b", "a"]
    assert memory_storage.list_keys() == []


def test_disabled_config_bypasses_cache(memory_storage, source) -> None:
    _seed(source)
    store = ActivityCacheStore(memory_storage, source, config=CacheConfig(enabled=False))
    service = ActivityService(source, store)

    service.get_activities("s1")

    assert memory_storage.read("s1.json") is None


def test_service_without_store_fetches_live(source) -> None:
    _seed(source)
    result = ActivityService(source).filter("s1", last_n=1)
    assert [a.id for a in result] == ["b"]
