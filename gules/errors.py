"""Central error types used across the application."""

from __future__ import annotations


class JulesAPIError(RuntimeError):
    """Base error for Jules API failures."""


class JulesAuthError(JulesAPIError):
    """Raised when no API key is configured or the API rejects it."""


class JulesResourceNotFoundError(JulesAPIError):
    """Raised when a session or activity does not exist."""


class ActivityCacheError(RuntimeError):
    """Base error for the local activity cache."""


class CacheStorageError(ActivityCacheError):
    """Raised when a cache blob cannot be read, written, or deleted."""


class CacheSerializationError(ActivityCacheError):
    """Raised when a cache blob cannot be parsed or encoded."""


class RemoteFetchError(ActivityCacheError):
    """Raised when the activity source fails; the cache is left untouched."""


__all__ = [
    "JulesAPIError",
    "JulesAuthError",
    "JulesResourceNotFoundError",
    "ActivityCacheError",
    "CacheStorageError",
    "CacheSerializationError",
    "RemoteFetchError",
]
