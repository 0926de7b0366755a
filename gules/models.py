"""Jules API data models.

Activities are kept as the raw JSON payload returned by the API so that every
field survives a round trip through the cache, including fields this package
does not know about yet. The activity *kind* is exposed as a tag computed from
the payload rather than as one optional attribute per kind.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ActivityKind(str, Enum):
    AGENT_MESSAGED = "agentMessaged"
    USER_MESSAGED = "userMessaged"
    PLAN_GENERATED = "planGenerated"
    PLAN_APPROVED = "planApproved"
    PROGRESS_UPDATED = "progressUpdated"
    SESSION_COMPLETED = "sessionCompleted"
    SESSION_FAILED = "sessionFailed"
    UNKNOWN = "unknown"


# Fields present on every activity regardless of kind.
STANDARD_FIELDS = frozenset(
    {"name", "id", "description", "createTime", "originator", "artifacts"}
)

_KNOWN_KINDS = [kind for kind in ActivityKind if kind is not ActivityKind.UNKNOWN]


def camel_to_title(value: str) -> str:
    """``progressUpdated`` -> ``Progress Updated``."""

    spaced = re.sub(r"(?<!^)(?=[A-Z])", " ", value)
    return spaced[:1].upper() + spaced[1:]


@dataclass
class Activity:
    """One activity record; ``payload`` is the verbatim API object."""

    payload: Dict[str, Any]

    @classmethod
    def from_payload(cls, payload: Any) -> "Activity":
        """Validate the fields the cache relies on and wrap the payload.

        Raises:
            ValueError: when the payload is not an object, has no usable id, or
                has no ``createTime`` string.
        """

        if not isinstance(payload, dict):
            raise ValueError(
                f"activity payload must be an object, got {type(payload).__name__}"
            )
        activity = cls(payload=dict(payload))
        if not activity.id:
            raise ValueError("activity payload has no id")
        if not isinstance(payload.get("createTime"), str):
            raise ValueError(f"activity {activity.id} has no createTime")
        return activity

    def to_payload(self) -> Dict[str, Any]:
        return dict(self.payload)

    @property
    def id(self) -> str:
        raw = self.payload.get("id")
        if isinstance(raw, str) and raw:
            return raw
        # Older payloads only carry the resource name: sessions/<s>/activities/<id>
        name = self.payload.get("name")
        if isinstance(name, str) and "/activities/" in name:
            return name.rsplit("/", 1)[-1]
        return ""

    @property
    def create_time(self) -> str:
        return str(self.payload.get("createTime", ""))

    @property
    def description(self) -> Optional[str]:
        return self.payload.get("description")

    @property
    def originator(self) -> str:
        return str(self.payload.get("originator", ""))

    @property
    def artifacts(self) -> List[Dict[str, Any]]:
        artifacts = self.payload.get("artifacts")
        if not isinstance(artifacts, list):
            return []
        return [item for item in artifacts if isinstance(item, dict)]

    @property
    def bash_outputs(self) -> List[Dict[str, Any]]:
        return [
            artifact["bashOutput"]
            for artifact in self.artifacts
            if isinstance(artifact.get("bashOutput"), dict)
        ]

    @property
    def kind(self) -> ActivityKind:
        for kind in _KNOWN_KINDS:
            if self.payload.get(kind.value) is not None:
                return kind
        return ActivityKind.UNKNOWN

    @property
    def unknown_kind_field(self) -> Optional[str]:
        """Name of the unrecognised kind field when ``kind`` is ``UNKNOWN``."""

        if self.kind is not ActivityKind.UNKNOWN:
            return None
        for key, value in self.payload.items():
            if key not in STANDARD_FIELDS and value is not None:
                return key
        return None

    def type_label(self) -> str:
        kind = self.kind
        if kind is not ActivityKind.UNKNOWN:
            return camel_to_title(kind.value)
        unknown = self.unknown_kind_field
        if unknown:
            return f"{camel_to_title(unknown)} [UNKNOWN]"
        return "[ERROR: No Activity Type]"

    def content(self) -> Optional[str]:
        """Return the human readable text carried by the activity, if any."""

        kind = self.kind
        body = self.payload.get(kind.value)
        if not isinstance(body, dict):
            body = {}
        if kind is ActivityKind.AGENT_MESSAGED:
            return str(body.get("agentMessage", ""))
        if kind is ActivityKind.USER_MESSAGED:
            return str(body.get("userMessage", ""))
        if kind is ActivityKind.PROGRESS_UPDATED:
            for output in self.bash_outputs:
                command = " ".join(str(output.get("command") or "").split())
                if command:
                    return f"Ran: {command}"
            title = body.get("title") or "Progress update"
            return f"{title}: {body.get('description') or ''}"
        if kind is ActivityKind.SESSION_FAILED:
            return f"Session failed: {body.get('reason', '')}"
        return None


@dataclass
class ActivityPage:
    """One page of the list-activities endpoint."""

    activities: List[Activity] = field(default_factory=list)
    next_page_token: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "ActivityPage":
        if not isinstance(payload, dict):
            raise ValueError(
                f"list response must be an object, got {type(payload).__name__}"
            )
        raw_items = payload.get("activities") or []
        if not isinstance(raw_items, list):
            raise ValueError("list response field 'activities' is not a list")
        token = payload.get("nextPageToken")
        return cls(
            activities=[Activity.from_payload(item) for item in raw_items],
            # An empty token means the same as a missing one: no further pages.
            next_page_token=token if isinstance(token, str) and token else None,
        )


__all__ = ["Activity", "ActivityKind", "ActivityPage", "camel_to_title"]
