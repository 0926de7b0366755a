"""Utilities for classifying and filtering Jules activities."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Sequence

from .models import Activity, ActivityKind

__all__ = ["ActivityTypeFilter", "filter_activities", "has_bash_output"]


class ActivityTypeFilter(str, Enum):
    AGENT_MESSAGE = "agent-message"
    USER_MESSAGE = "user-message"
    PLAN = "plan"
    PLAN_APPROVED = "plan-approved"
    PROGRESS = "progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: str) -> "ActivityTypeFilter":
        """Resolve a user supplied name or alias, case-insensitively.

        Raises:
            ValueError: for names that match no filter.
        """

        normalized = str(value).strip().lower()
        try:
            return _ALIASES[normalized]
        except KeyError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unknown activity type: {value}. Valid options: {valid}"
            ) from None

    @property
    def kind(self) -> ActivityKind:
        return _KINDS[self]

    def matches(self, activity: Activity) -> bool:
        return activity.kind is self.kind


_KINDS = {
    ActivityTypeFilter.AGENT_MESSAGE: ActivityKind.AGENT_MESSAGED,
    ActivityTypeFilter.USER_MESSAGE: ActivityKind.USER_MESSAGED,
    ActivityTypeFilter.PLAN: ActivityKind.PLAN_GENERATED,
    ActivityTypeFilter.PLAN_APPROVED: ActivityKind.PLAN_APPROVED,
    ActivityTypeFilter.PROGRESS: ActivityKind.PROGRESS_UPDATED,
    ActivityTypeFilter.COMPLETED: ActivityKind.SESSION_COMPLETED,
    ActivityTypeFilter.FAILED: ActivityKind.SESSION_FAILED,
}

_ALIASES = {
    "agent-message": ActivityTypeFilter.AGENT_MESSAGE,
    "agent": ActivityTypeFilter.AGENT_MESSAGE,
    "user-message": ActivityTypeFilter.USER_MESSAGE,
    "user": ActivityTypeFilter.USER_MESSAGE,
    "plan": ActivityTypeFilter.PLAN,
    "plan-generated": ActivityTypeFilter.PLAN,
    "plan-approved": ActivityTypeFilter.PLAN_APPROVED,
    "approved": ActivityTypeFilter.PLAN_APPROVED,
    "progress": ActivityTypeFilter.PROGRESS,
    "progress-updated": ActivityTypeFilter.PROGRESS,
    "completed": ActivityTypeFilter.COMPLETED,
    "session-completed": ActivityTypeFilter.COMPLETED,
    "failed": ActivityTypeFilter.FAILED,
    "session-failed": ActivityTypeFilter.FAILED,
    "error": ActivityTypeFilter.FAILED,
}


def has_bash_output(activity: Activity) -> bool:
    return bool(activity.bash_outputs)


def filter_activities(
    activities: Iterable[Activity],
    *,
    types: Sequence[ActivityTypeFilter] = (),
    bash_output_only: bool = False,
    last_n: Optional[int] = None,
) -> List[Activity]:
    """Apply type and bash-output filters, then keep the first ``last_n``.

    Input is expected newest first, so ``last_n`` keeps the most recent
    activities. An empty ``types`` sequence implies no type filtering.
    """

    selected = list(activities)
    if types:
        selected = [a for a in selected if any(f.matches(a) for f in types)]
    if bash_output_only:
        selected = [a for a in selected if has_bash_output(a)]
    if last_n is not None:
        selected = selected[: max(0, last_n)]
    return selected
