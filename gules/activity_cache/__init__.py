"""Local activity cache with incremental refresh and FIFO session eviction."""

from .merge import merge_activities, parse_create_time, sort_activities
from .models import CacheConfig, CacheMetadata, CacheStats, SessionCache
from .storage import BlobStorage, DirectoryStorage, MemoryStorage
from .store import ActivityCacheStore, ActivitySource, fetch_all_activities

__all__ = [
    "ActivityCacheStore",
    "ActivitySource",
    "BlobStorage",
    "CacheConfig",
    "CacheMetadata",
    "CacheStats",
    "DirectoryStorage",
    "MemoryStorage",
    "SessionCache",
    "fetch_all_activities",
    "merge_activities",
    "parse_create_time",
    "sort_activities",
]
