"""Merge and ordering helpers for cached activity lists."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from ..models import Activity

LOGGER = logging.getLogger(__name__)

_FRACTION = re.compile(r"\.(\d+)")


def parse_create_time(raw: str) -> Optional[datetime]:
    """Return ``raw`` as an aware UTC datetime, or ``None`` if it does not parse.

    Accepts a ``Z`` suffix or numeric offset and 1-9 fractional digits (the API
    emits nanosecond precision; anything past microseconds is truncated).
    Naive values are treated as UTC.
    """

    if not isinstance(raw, str) or not raw:
        return None
    value = raw.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def sort_activities(activities: Iterable[Activity]) -> List[Activity]:
    """Sort newest first by ``createTime``.

    Timestamps are compared as parsed datetimes so mixed precision and offsets
    order chronologically. If any timestamp in the batch fails to parse the
    whole batch is compared as raw strings instead, which matches chronological
    order only for fixed-width UTC values.
    """

    items = list(activities)
    parsed = [parse_create_time(activity.create_time) for activity in items]
    if all(stamp is not None for stamp in parsed):
        order = sorted(range(len(items)), key=lambda i: parsed[i], reverse=True)
        return [items[i] for i in order]
    LOGGER.debug(
        "Unparseable createTime in %s activities; ordering lexicographically",
        len(items),
    )
    return sorted(items, key=lambda activity: activity.create_time, reverse=True)


def merge_activities(
    existing: Sequence[Activity], incoming: Sequence[Activity]
) -> List[Activity]:
    """Union by id where ``incoming`` wins on collision; newest first."""

    merged: Dict[str, Activity] = {}
    for activity in existing:
        merged[activity.id] = activity
    for activity in incoming:
        merged[activity.id] = activity
    return sort_activities(merged.values())


__all__ = ["merge_activities", "parse_create_time", "sort_activities"]
