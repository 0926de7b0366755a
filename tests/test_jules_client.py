"""Tests for the Jules REST client using fake HTTP responses."""

from __future__ import annotations

import json

import pytest
import requests

from gules import config
from gules.errors import JulesAPIError, JulesAuthError, JulesResourceNotFoundError
from gules.jules_client import JulesClient, resolve_api_key
from gules.jules_client import resources as resources_module


class FakeResp:
    """Minimal fake response matching needed parts of requests.Response."""

    def __init__(self, status_code=200, data=None, text=None):
        self.status_code = status_code
        self._data = data
        self._text = text
        self.url = "https://example.test"

    def json(self):
        if self._data is None:
            raise ValueError("no json")
        return self._data

    @property
    def text(self):
        if self._text is not None:
            return self._text
        return json.dumps(self._data)


class FakeSession:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params})
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(resources_module.time, "sleep", lambda *_args: None)


def _client(responses) -> tuple[JulesClient, FakeSession]:
    session = FakeSession(responses)
    client = JulesClient("key-123", base_url="https://api.test/v1alpha/", session=session)
    return client, session


def _activity(activity_id: str) -> dict:
    return {"id": activity_id, "createTime": "2024-01-01T00:00:00Z", "extra": {"k": 1}}


def test_list_activities_builds_request_and_parses_page() -> None:
    client, session = _client(
        [FakeResp(200, {"activities": [_activity("a")], "nextPageToken": "tok2"})]
    )

    page = client.list_activities("s 1", page_size=25, page_token="tok1")

    call = session.calls[0]
    assert call["url"] == "https://api.test/v1alpha/sessions/s%201/activities"
    assert call["params"] == {"pageSize": 25, "pageToken": "tok1"}
    assert call["headers"] == {"X-Goog-Api-Key": "key-123"}
    assert [a.id for a in page.activities] == ["a"]
    assert page.activities[0].payload["extra"] == {"k": 1}
    assert page.next_page_token == "tok2"


def test_first_page_omits_token() -> None:
    client, session = _client([FakeResp(200, {})])
    page = client.list_activities("s1")
    assert session.calls[0]["params"] == {"pageSize": config.ACTIVITIES_PAGE_SIZE}
    assert page.activities == [] and page.next_page_token is None


def test_server_errors_are_retried() -> None:
    client, session = _client(
        [
            FakeResp(503, {"error": {"code": 503, "message": "busy", "status": "UNAVAILABLE"}}),
            requests.ConnectionError("reset"),
            FakeResp(200, {"activities": [_activity("a")]}),
        ]
    )
    page = client.list_activities("s1")
    assert len(session.calls) == 3
    assert [a.id for a in page.activities] == ["a"]


def test_retries_exhausted_raise_api_error() -> None:
    client, _ = _client([FakeResp(500, text="oops")] * config.JULES_MAX_RETRIES)
    with pytest.raises(JulesAPIError, match="oops"):
        client.list_activities("s1")


def test_not_found_maps_to_resource_error() -> None:
    body = {"error": {"code": 404, "message": "Session not found", "status": "NOT_FOUND"}}
    client, session = _client([FakeResp(404, body)])
    with pytest.raises(JulesResourceNotFoundError, match="404: Session not found"):
        client.get_activity("s1", "a1")
    assert len(session.calls) == 1


def test_forbidden_maps_to_auth_error() -> None:
    client, _ = _client([FakeResp(403, {"error": {"message": "bad key"}})])
    with pytest.raises(JulesAuthError):
        client.list_activities("s1")


def test_malformed_payload_raises_api_error() -> None:
    client, _ = _client([FakeResp(200, {"activities": [{"id": "x"}]})])
    with pytest.raises(JulesAPIError, match="unexpected payload"):
        client.list_activities("s1")


def test_get_activity_returns_activity() -> None:
    client, session = _client([FakeResp(200, _activity("a1"))])
    activity = client.get_activity("s1", "a1")
    assert activity.id == "a1"
    assert session.calls[0]["url"].endswith("/sessions/s1/activities/a1")


def test_missing_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "JULES_API_KEY", "")
    with pytest.raises(JulesAuthError):
        resolve_api_key(None)
    monkeypatch.setattr(config, "JULES_API_KEY", "env-key")
    assert resolve_api_key(None) == "env-key"
    assert resolve_api_key("cli-key") == "cli-key"
