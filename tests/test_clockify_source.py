"""Tests for the Clockify earnings source, run against httpx.MockTransport."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from services.clockify import ClockifySource, SourceUnavailableError, _iso_utc
from tests.conftest import make_entry

START = datetime(2025, 6, 1, tzinfo=timezone.utc)
END = datetime(2025, 6, 1, 23, 59, 59, 999000, tzinfo=timezone.utc)


def _source(handler):
    return ClockifySource(
        api_key="test-key",
        workspace_id="ws-123",
        transport=httpx.MockTransport(handler),
    )


def test_iso_utc_format():
    assert _iso_utc(START) == "2025-06-01T00:00:00.000Z"
    assert _iso_utc(END) == "2025-06-01T23:59:59.999Z"


def test_request_shape():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"timeentries": []})

    _source(handler).fetch_time_entries(START, END)

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://reports.api.clockify.me/v1/workspaces/ws-123/reports/detailed"
    assert request.headers["X-Api-Key"] == "test-key"
    assert json.loads(request.content) == {
        "dateRangeStart": "2025-06-01T00:00:00.000Z",
        "dateRangeEnd": "2025-06-01T23:59:59.999Z",
        "detailedFilter": {"page": 1, "pageSize": 1000},
    }


def test_get_total_returns_dollars():
    def handler(request):
        return httpx.Response(200, json={"timeentries": [
            make_entry("2025-06-01T09:00:00Z", 12345),
            make_entry("2025-06-01T12:00:00Z", 9999, billable=False),
        ]})

    assert _source(handler).get_total(START, END) == 123


def test_follows_pagination_until_short_page(monkeypatch):
    monkeypatch.setattr("services.clockify.PAGE_SIZE", 2)
    pages = {
        1: [make_entry("2025-06-01T09:00:00Z", 100), make_entry("2025-06-01T10:00:00Z", 100)],
        2: [make_entry("2025-06-01T11:00:00Z", 100), make_entry("2025-06-01T12:00:00Z", 100)],
        3: [make_entry("2025-06-01T13:00:00Z", 100)],
    }
    requested = []

    def handler(request):
        page = json.loads(request.content)["detailedFilter"]["page"]
        requested.append(page)
        return httpx.Response(200, json={"timeentries": pages[page]})

    entries = _source(handler).fetch_time_entries(START, END)
    assert len(entries) == 5
    assert requested == [1, 2, 3]


def test_http_error_carries_status():
    def handler(request):
        return httpx.Response(401, json={"message": "Unauthorized"})

    with pytest.raises(SourceUnavailableError) as exc:
        _source(handler).get_total(START, END)
    assert exc.value.status == 401
    assert "Status: 401" in str(exc.value)


def test_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused")

    with pytest.raises(SourceUnavailableError) as exc:
        _source(handler).get_total(START, END)
    assert exc.value.status is None
    assert "Status: N/A" in str(exc.value)


def test_invalid_json():
    def handler(request):
        return httpx.Response(200, content=b"<html>oops</html>")

    with pytest.raises(SourceUnavailableError):
        _source(handler).get_total(START, END)


def test_missing_credentials(monkeypatch):
    monkeypatch.delenv("CLOCKIFY_API_KEY", raising=False)
    monkeypatch.delenv("CLOCKIFY_WORKSPACE_ID", raising=False)

    def handler(request):
        raise AssertionError("should not be called")

    source = ClockifySource(transport=httpx.MockTransport(handler))
    with pytest.raises(SourceUnavailableError):
        source.get_total(START, END)


def test_credentials_from_environment(monkeypatch):
    monkeypatch.setenv("CLOCKIFY_API_KEY", "env-key")
    monkeypatch.setenv("CLOCKIFY_WORKSPACE_ID", "env-ws")
    source = ClockifySource()
    assert source.api_key == "env-key"
    assert source.report_url.endswith("/workspaces/env-ws/reports/detailed")
