"""Jules session activities with a bounded local cache."""

from .activity_cache import ActivityCacheStore, CacheConfig
from .errors import ActivityCacheError, JulesAPIError
from .jules_client import JulesClient
from .main import main
from .models import Activity, ActivityKind, ActivityPage

__all__ = [
    "main",
    "Activity",
    "ActivityCacheError",
    "ActivityCacheStore",
    "ActivityKind",
    "ActivityPage",
    "CacheConfig",
    "JulesAPIError",
    "JulesClient",
]
