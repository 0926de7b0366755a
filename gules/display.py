"""Plain-text rendering of activities and cache statistics."""

from __future__ import annotations

import json
from enum import Enum
from typing import List, Sequence

from .activity_cache import CacheStats, SessionCache
from .models import Activity

__all__ = ["OutputFormat", "render_activities", "render_cache_stats"]


class OutputFormat(str, Enum):
    JSON = "json"
    TABLE = "table"
    FULL = "full"
    CONTENT = "content"


def _truncate(text: str, width: int) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= width else flat[: width - 3] + "..."


def _table(activities: Sequence[Activity]) -> List[str]:
    lines = [f"Activities ({len(activities)})", "=" * 20]
    header = f"{'ID':<18} {'TYPE':<20} {'TIME':<28} CONTENT"
    lines.append(header)
    for activity in activities:
        lines.append(
            f"{_truncate(activity.id, 18):<18} "
            f"{_truncate(activity.type_label(), 20):<20} "
            f"{activity.create_time:<28} "
            f"{_truncate(activity.content() or '', 60)}"
        )
    return lines


def _full(activities: Sequence[Activity]) -> List[str]:
    rule = "-" * 41
    lines: List[str] = []
    total = len(activities)
    for index, activity in enumerate(activities, start=1):
        lines += [rule, f"Activity {index}/{total}", rule]
        lines.append(f"ID: {activity.id}")
        lines.append(f"Type: {activity.type_label()}")
        lines.append(f"Time: {activity.create_time}")
        lines.append(f"Originator: {activity.originator}")
        if activity.description:
            lines.append(f"Description: {activity.description}")
        content = activity.content()
        if content:
            lines += ["", "Content:", content]
        for output in activity.bash_outputs:
            lines += ["", f"$ {str(output.get('command') or '').strip()}"]
            lines.append(str(output.get("output", "")).rstrip())
            if output.get("exitCode") is not None:
                lines.append(f"(exit code {output['exitCode']})")
        lines.append("")
    return lines


def render_activities(activities: Sequence[Activity], fmt: OutputFormat) -> str:
    if fmt is OutputFormat.JSON:
        return json.dumps([a.to_payload() for a in activities], indent=2)
    if not activities:
        return "No activities found matching the filters."
    if fmt is OutputFormat.TABLE:
        return "\n".join(_table(activities))
    if fmt is OutputFormat.FULL:
        return "\n".join(_full(activities))
    return "\n\n".join(a.content() or "" for a in activities if a.content())


def render_cache_stats(stats: CacheStats, sessions: Sequence[SessionCache]) -> str:
    lines = [
        "Activity Cache Statistics",
        "=" * 27,
        f"Status: {'Enabled' if stats.enabled else 'Disabled'}",
        f"Location: {stats.location}",
        "",
        f"Sessions: {stats.total_sessions}/{stats.max_sessions}",
        f"Total Activities: {stats.total_activities}",
        f"Disk Usage: {stats.total_size_bytes / 1_048_576:.2f} MiB",
    ]
    if sessions:
        lines += ["", "Cached Sessions:"]
        for index, cache in enumerate(sessions, start=1):
            lines.append(
                f"  {index}. {cache.session_id} ({len(cache.activities)} activities, "
                f"updated {cache.last_updated:%Y-%m-%d %H:%M})"
            )
    return "\n".join(lines)
