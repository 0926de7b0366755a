"""Tests for activity rendering."""

from __future__ import annotations

from conftest import make_activity
from gules.display import OutputFormat, render_activities


def test_full_format_tolerates_null_command() -> None:
    activity = make_activity(
        "a",
        "2024-01-01T00:00:00Z",
        progressUpdated={"title": "Build"},
        artifacts=[{"bashOutput": {"command": None, "output": "o", "exitCode": 0}}],
    )

    text = render_activities([activity], OutputFormat.FULL)

    assert "$ \no" in text
    assert "(exit code 0)" in text


def test_full_format_shows_command_and_output() -> None:
    activity = make_activity(
        "a",
        "2024-01-01T00:00:00Z",
        progressUpdated={},
        artifacts=[{"bashOutput": {"command": "  pytest -q ", "output": "ok\n"}}],
    )

    text = render_activities([activity], OutputFormat.FULL)

    assert "Type: Progress Updated" in text
    assert "Ran: pytest -q" in text
    assert "$ pytest -q\nok" in text


def test_empty_selection_message() -> None:
    assert render_activities([], OutputFormat.TABLE) == "No activities found matching the filters."


def test_null_command_falls_back_to_progress_text() -> None:
    activity = make_activity(
        "a",
        "2024-01-01T00:00:00Z",
        progressUpdated={"title": "Build", "description": "done"},
        artifacts=[{"bashOutput": {"command": None, "output": "o"}}],
    )
    assert activity.content() == "Build: done"
