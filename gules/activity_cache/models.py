"""Dataclasses persisted by the activity cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..models import Activity

DEFAULT_MAX_SESSIONS = 50


def _parse_stamp(value: Any, label: str) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"{label} must be an ISO-8601 string")
    raw = value[:-1] + "+00:00" if value.endswith("Z") else value
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass
class CacheConfig:
    enabled: bool = True
    max_sessions: int = DEFAULT_MAX_SESSIONS

    def __post_init__(self) -> None:
        if self.max_sessions < 1:
            raise ValueError("max_sessions must be >= 1")

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "max_sessions": self.max_sessions}

    @classmethod
    def from_dict(cls, data: Any) -> "CacheConfig":
        if not isinstance(data, dict):
            raise ValueError("config must be an object")
        enabled = data.get("enabled", True)
        max_sessions = data.get("max_sessions", DEFAULT_MAX_SESSIONS)
        if not isinstance(enabled, bool):
            raise ValueError("config.enabled must be a boolean")
        if isinstance(max_sessions, bool) or not isinstance(max_sessions, int):
            raise ValueError("config.max_sessions must be an integer")
        return cls(enabled=enabled, max_sessions=max_sessions)


@dataclass
class CacheMetadata:
    """Process-wide bookkeeping: FIFO access order plus cache config."""

    # Oldest-touched first; each id at most once.
    access_order: List[str] = field(default_factory=list)
    config: CacheConfig = field(default_factory=CacheConfig)

    def touch(self, session_id: str) -> None:
        """Move ``session_id`` to the most-recently-used end."""

        self.discard(session_id)
        self.access_order.append(session_id)

    def discard(self, session_id: str) -> None:
        self.access_order = [sid for sid in self.access_order if sid != session_id]

    def overflow(self) -> List[str]:
        """Pop and return the oldest ids beyond ``config.max_sessions``."""

        excess = len(self.access_order) - self.config.max_sessions
        if excess <= 0:
            return []
        evicted = self.access_order[:excess]
        self.access_order = self.access_order[excess:]
        return evicted

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_order": list(self.access_order),
            "config": self.config.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "CacheMetadata":
        if not isinstance(data, dict):
            raise ValueError("metadata must be an object")
        order = data.get("access_order", [])
        if not isinstance(order, list) or not all(isinstance(x, str) for x in order):
            raise ValueError("access_order must be a list of strings")
        deduped: List[str] = []
        for session_id in order:
            if session_id not in deduped:
                deduped.append(session_id)
        return cls(
            access_order=deduped,
            config=CacheConfig.from_dict(data.get("config", {})),
        )


@dataclass
class SessionCache:
    """Cached activities of one session, newest first."""

    session_id: str
    activities: List[Activity] = field(default_factory=list)
    last_page_token: Optional[str] = None
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "activities": [activity.to_payload() for activity in self.activities],
            "last_page_token": self.last_page_token,
            "last_updated": self.last_updated.isoformat(),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SessionCache":
        if not isinstance(data, dict):
            raise ValueError("session cache must be an object")
        session_id = data.get("session_id")
        if not isinstance(session_id, str) or not session_id:
            raise ValueError("session cache has no session_id")
        raw_activities = data.get("activities", [])
        if not isinstance(raw_activities, list):
            raise ValueError("session cache activities must be a list")
        token = data.get("last_page_token")
        if token is not None and not isinstance(token, str):
            raise ValueError("last_page_token must be a string or null")
        return cls(
            session_id=session_id,
            activities=[Activity.from_payload(item) for item in raw_activities],
            last_page_token=token,
            last_updated=_parse_stamp(data.get("last_updated"), "last_updated"),
            created_at=_parse_stamp(data.get("created_at"), "created_at"),
        )


@dataclass(frozen=True)
class CacheStats:
    enabled: bool
    total_sessions: int
    max_sessions: int
    total_activities: int
    total_size_bytes: int
    location: str


__all__ = [
    "CacheConfig",
    "CacheMetadata",
    "CacheStats",
    "DEFAULT_MAX_SESSIONS",
    "SessionCache",
]
