"""Tests for activity merge / ordering helpers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from conftest import make_activity
from gules.activity_cache.merge import (
    merge_activities,
    parse_create_time,
    sort_activities,
)


def _ids(activities) -> list[str]:
    return [a.id for a in activities]


def test_merge_deduplicates_and_incoming_wins() -> None:
    existing = [
        make_activity("1", "2024-01-01T00:00:01Z"),
        make_activity("2", "2024-01-01T00:00:02Z"),
    ]
    updated = make_activity("1", "2024-01-01T00:00:01Z", sessionFailed={"reason": "x"})

    merged = merge_activities(existing, [updated])

    assert sorted(_ids(merged)) == ["1", "2"]
    assert next(a for a in merged if a.id == "1") == updated


def test_merge_union_has_no_repeats() -> None:
    existing = [make_activity(str(i), f"2024-01-01T00:00:{i:02d}Z") for i in range(5)]
    incoming = [make_activity(str(i), f"2024-01-01T00:01:{i:02d}Z") for i in range(3, 8)]

    merged = merge_activities(existing, incoming)

    assert len(merged) == len(set(_ids(merged))) == 8
    for activity in incoming:
        assert next(a for a in merged if a.id == activity.id) == activity


def test_merge_sorts_newest_first() -> None:
    merged = merge_activities(
        [make_activity("1", "2024-01-01T00:00:30Z")],
        [
            make_activity("2", "2024-01-01T00:00:40Z"),
            make_activity("3", "2024-01-01T00:00:50Z"),
        ],
    )
    assert _ids(merged) == ["3", "2", "1"]
    for newer, older in zip(merged, merged[1:]):
        assert parse_create_time(newer.create_time) >= parse_create_time(older.create_time)


def test_merge_is_idempotent() -> None:
    a = [make_activity("1", "2024-01-01T00:00:01Z"), make_activity("2", "2024-01-02T00:00:00Z")]
    b = [make_activity("2", "2024-01-02T00:00:00Z", planApproved={"planId": "p"})]

    once = merge_activities(a, b)
    twice = merge_activities(once, b)

    assert {x.id: x for x in once} == {x.id: x for x in twice}
    assert _ids(once) == _ids(twice)


def test_merge_preserves_unknown_fields() -> None:
    activity = make_activity("9", "2024-01-01T00:00:00Z", brandNewKind={"k": [1, 2]})
    merged = merge_activities([], [activity])
    assert merged[0].payload["brandNewKind"] == {"k": [1, 2]}


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2024-01-01T00:00:00Z", datetime(2024, 1, 1, tzinfo=timezone.utc)),
        (
            "2024-01-01T00:00:00.123456789Z",
            datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc),
        ),
        ("2024-01-01T02:00:00+02:00", datetime(2024, 1, 1, tzinfo=timezone.utc)),
        ("2024-01-01T00:00:00.5", datetime(2024, 1, 1, 0, 0, 0, 500000, tzinfo=timezone.utc)),
        ("not-a-time", None),
        ("", None),
    ],
)
def test_parse_create_time(raw: str, expected) -> None:
    assert parse_create_time(raw) == expected


def test_parsed_and_lexicographic_order_agree_on_fixed_width_utc() -> None:
    samples = [
        make_activity("a", "2024-01-01T00:00:00Z"),
        make_activity("b", "2024-03-05T10:20:30Z"),
        make_activity("c", "2023-12-31T23:59:59Z"),
        make_activity("d", "2024-03-05T10:20:31Z"),
    ]
    lexicographic = sorted(samples, key=lambda a: a.create_time, reverse=True)
    assert _ids(sort_activities(samples)) == _ids(lexicographic) == ["d", "b", "a", "c"]


def test_mixed_precision_orders_chronologically() -> None:
    # Lexicographically "...00Z" > "...00.5Z" although 00.5 is later.
    earlier = make_activity("early", "2024-01-01T00:00:00Z")
    later = make_activity("late", "2024-01-01T00:00:00.5Z")
    assert _ids(sort_activities([earlier, later])) == ["late", "early"]


def test_unparseable_timestamp_falls_back_to_string_order() -> None:
    items = [
        make_activity("x", "2024-01-01T00:00:00Z"),
        make_activity("y", "garbage"),
    ]
    assert _ids(sort_activities(items)) == ["y", "x"]
