"""Persistent, bounded cache of Jules session activities.

Each cached session lives in its own ``<session_id>.json`` blob next to a
single ``metadata.json`` that tracks the FIFO access order and the cache
configuration. Refreshing a cached session fetches one page from the last
stored page token and merges it by activity id; a cold session is fetched in
full up to a fixed ceiling. Once the number of cached sessions exceeds
``max_sessions`` the least recently touched sessions are evicted.

Concurrent processes sharing one cache directory are not coordinated: the last
writer of ``metadata.json`` wins.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Protocol

import requests

from ..config import ACTIVITIES_PAGE_SIZE, MAX_ACTIVITIES_TO_FETCH
from ..errors import (
    ActivityCacheError,
    CacheSerializationError,
    CacheStorageError,
    JulesAPIError,
    RemoteFetchError,
)
from ..models import Activity, ActivityPage
from .merge import merge_activities
from .models import CacheConfig, CacheMetadata, CacheStats, SessionCache
from .storage import BlobStorage, DirectoryStorage

LOGGER = logging.getLogger(__name__)

METADATA_KEY = "metadata.json"
_RESERVED_SESSION_IDS = frozenset({"metadata"})


class ActivitySource(Protocol):
    """Anything that can list one page of a session's activities."""

    def list_activities(
        self,
        session_id: str,
        page_size: int = ACTIVITIES_PAGE_SIZE,
        page_token: Optional[str] = None,
    ) -> ActivityPage: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _list_page(
    source: ActivitySource,
    session_id: str,
    page_size: int,
    page_token: Optional[str],
) -> ActivityPage:
    try:
        return source.list_activities(
            session_id, page_size=page_size, page_token=page_token
        )
    except (JulesAPIError, requests.RequestException) as exc:
        raise RemoteFetchError(
            f"Failed to list activities for session {session_id}: {exc}"
        ) from exc


def fetch_all_activities(
    source: ActivitySource,
    session_id: str,
    *,
    page_size: int = ACTIVITIES_PAGE_SIZE,
    max_activities: int = MAX_ACTIVITIES_TO_FETCH,
) -> List[Activity]:
    """Page through a session from the start, newest first on return.

    Stops when the source reports no further page or once ``max_activities``
    have been accumulated, whichever comes first.
    """

    collected: List[Activity] = []
    page_token: Optional[str] = None
    pages = 0
    while len(collected) < max_activities:
        page = _list_page(source, session_id, page_size, page_token)
        pages += 1
        collected.extend(page.activities)
        if page.next_page_token is None or len(collected) >= max_activities:
            break
        if page.next_page_token == page_token:
            LOGGER.warning(
                "Activity source repeated page token for session=%s page=%s; stopping",
                session_id,
                pages,
            )
            break
        page_token = page.next_page_token
    LOGGER.debug(
        "Full fetch session=%s pages=%s activities=%s",
        session_id,
        pages,
        len(collected),
    )
    return merge_activities([], collected)


class ActivityCacheStore:
    """Local mirror of remote per-session activity lists."""

    def __init__(
        self,
        storage: BlobStorage,
        source: Optional[ActivitySource] = None,
        *,
        config: Optional[CacheConfig] = None,
        page_size: int = ACTIVITIES_PAGE_SIZE,
        max_activities: int = MAX_ACTIVITIES_TO_FETCH,
    ) -> None:
        self._storage = storage
        self._source = source
        # When given, overrides whatever config metadata.json carries.
        self._config = config
        self._page_size = page_size
        self._max_activities = max_activities
        self._lock = threading.RLock()

    @classmethod
    def from_directory(
        cls,
        base_dir: str | Path,
        source: Optional[ActivitySource] = None,
        *,
        config: Optional[CacheConfig] = None,
    ) -> "ActivityCacheStore":
        return cls(DirectoryStorage(base_dir), source, config=config)

    @property
    def location(self) -> str:
        return self._storage.location

    @property
    def config(self) -> CacheConfig:
        return self.load_metadata().config

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    @staticmethod
    def _session_key(session_id: str) -> str:
        if (
            not isinstance(session_id, str)
            or not session_id
            or "/" in session_id
            or "\\" in session_id
            or session_id.startswith(".")
            or session_id.lower() in _RESERVED_SESSION_IDS
        ):
            raise ValueError(f"Invalid session id for cache: {session_id!r}")
        return f"{session_id}.json"

    @staticmethod
    def _encode(payload: object, label: str) -> bytes:
        try:
            return json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise CacheSerializationError(f"Failed to serialize {label}: {exc}") from exc

    @staticmethod
    def _decode(blob: bytes, label: str) -> object:
        try:
            return json.loads(blob.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise CacheSerializationError(f"Failed to parse {label}: {exc}") from exc

    def _default_metadata(self) -> CacheMetadata:
        return CacheMetadata(config=self._config or CacheConfig())

    def _save_metadata(self, metadata: CacheMetadata) -> None:
        self._storage.write(METADATA_KEY, self._encode(metadata.to_dict(), "metadata"))

    def load_metadata(self) -> CacheMetadata:
        """Return the metadata, creating and persisting defaults when absent."""

        with self._lock:
            blob = self._storage.read(METADATA_KEY)
            if blob is None:
                metadata = self._default_metadata()
                self._save_metadata(metadata)
                return metadata
            data = self._decode(blob, "metadata")
            try:
                metadata = CacheMetadata.from_dict(data)
            except ValueError as exc:
                raise CacheSerializationError(f"Failed to parse metadata: {exc}") from exc
            if self._config is not None:
                metadata.config = self._config
            return metadata

    def load_session(self, session_id: str) -> Optional[SessionCache]:
        """Return the cached snapshot for ``session_id`` or ``None``."""

        key = self._session_key(session_id)
        with self._lock:
            blob = self._storage.read(key)
        if blob is None:
            return None
        label = f"cache for session {session_id}"
        data = self._decode(blob, label)
        try:
            cache = SessionCache.from_dict(data)
        except ValueError as exc:
            raise CacheSerializationError(f"Failed to parse {label}: {exc}") from exc
        if cache.session_id != session_id:
            raise CacheSerializationError(
                f"Failed to parse {label}: blob belongs to {cache.session_id}"
            )
        return cache

    def _save_session(self, cache: SessionCache) -> None:
        key = self._session_key(cache.session_id)
        label = f"cache for session {cache.session_id}"
        self._storage.write(key, self._encode(cache.to_dict(), label))

    # ------------------------------------------------------------------
    # Access order / eviction
    # ------------------------------------------------------------------
    def _touch(self, session_id: str) -> None:
        metadata = self.load_metadata()
        metadata.touch(session_id)
        for evicted in metadata.overflow():
            try:
                key = self._session_key(evicted)
            except ValueError:
                LOGGER.warning("Dropping invalid session id %r from metadata", evicted)
                continue
            removed = self._storage.delete(key)
            LOGGER.info(
                "Evicted cached session=%s blob_removed=%s max_sessions=%s",
                evicted,
                removed,
                metadata.config.max_sessions,
            )
        self._save_metadata(metadata)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    def _require_source(self) -> ActivitySource:
        if self._source is None:
            raise ActivityCacheError("No activity source configured for refresh")
        return self._source

    def get_or_refresh(self, session_id: str) -> List[Activity]:
        """Return the session's activities after syncing with the source.

        Cold sessions are fetched in full; cached ones fetch a single page from
        the stored page token and merge it. Nothing is written unless the
        fetch succeeds. The session becomes the most recently used one.
        """

        source = self._require_source()
        with self._lock:
            existing = self.load_session(session_id)
            now = _utcnow()
            if existing is None:
                activities = fetch_all_activities(
                    source,
                    session_id,
                    page_size=self._page_size,
                    max_activities=self._max_activities,
                )
                cache = SessionCache(
                    session_id=session_id,
                    activities=activities,
                    last_page_token=None,
                    last_updated=now,
                    created_at=now,
                )
                LOGGER.info(
                    "Created activity cache session=%s activities=%s",
                    session_id,
                    len(activities),
                )
            else:
                page = _list_page(
                    source, session_id, self._page_size, existing.last_page_token
                )
                cache = existing
                before = len(cache.activities)
                cache.activities = merge_activities(cache.activities, page.activities)
                cache.last_page_token = page.next_page_token
                cache.last_updated = now
                LOGGER.debug(
                    "Refreshed activity cache session=%s fetched=%s new=%s total=%s",
                    session_id,
                    len(page.activities),
                    len(cache.activities) - before,
                    len(cache.activities),
                )
            self._save_session(cache)
            self._touch(session_id)
            return list(cache.activities)

    def delete(self, session_id: str) -> bool:
        """Forget one session; returns True when a blob was removed."""

        key = self._session_key(session_id)
        with self._lock:
            removed = self._storage.delete(key)
            metadata = self.load_metadata()
            metadata.discard(session_id)
            self._save_metadata(metadata)
        LOGGER.info("Deleted cached session=%s blob_removed=%s", session_id, removed)
        return removed

    def clear_all(self) -> None:
        """Remove every cached session and reset metadata to defaults."""

        with self._lock:
            self._storage.clear()
            self._save_metadata(self._default_metadata())
        LOGGER.info("Cleared activity cache location=%s", self.location)

    def list_cached_session_ids(self) -> List[str]:
        return list(self.load_metadata().access_order)

    def stats(self) -> CacheStats:
        """Aggregate counts over ``access_order``.

        Sessions whose blob is missing or unreadable are skipped rather than
        failing the whole aggregate.
        """

        with self._lock:
            metadata = self.load_metadata()
            total_activities = 0
            total_size = 0
            for session_id in metadata.access_order:
                try:
                    cache = self.load_session(session_id)
                except (ValueError, ActivityCacheError) as exc:
                    LOGGER.warning(
                        "Skipping unreadable cached session=%s: %s", session_id, exc
                    )
                    continue
                if cache is None:
                    LOGGER.debug("Cached session=%s has no blob", session_id)
                    continue
                total_activities += len(cache.activities)
                total_size += self._storage.size(self._session_key(session_id)) or 0
            return CacheStats(
                enabled=metadata.config.enabled,
                total_sessions=len(metadata.access_order),
                max_sessions=metadata.config.max_sessions,
                total_activities=total_activities,
                total_size_bytes=total_size,
                location=self.location,
            )


__all__ = [
    "ActivityCacheStore",
    "ActivitySource",
    "METADATA_KEY",
    "fetch_all_activities",
]
