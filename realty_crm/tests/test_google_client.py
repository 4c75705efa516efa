"""Test the Google OAuth / Calendar REST client."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import pytest

from realty_crm.errors import GoogleCalendarError
from realty_crm.google.client import GoogleCalendarClient, task_event_body


def test_authorization_url_requests_offline_consent(google_client):
    url = google_client.get_authorization_url(state="user-123")
    parsed = urlparse(url)
    qs = parse_qs(parsed.query)

    assert parsed.netloc == "accounts.google.com"
    assert qs["client_id"] == ["client-id"]
    assert qs["access_type"] == ["offline"]
    assert qs["prompt"] == ["consent"]
    assert qs["response_type"] == ["code"]
    assert qs["state"] == ["user-123"]
    assert "https://www.googleapis.com/auth/calendar.events" in qs["scope"][0]


def test_authorization_url_requires_client_id():
    client = GoogleCalendarClient(None, None, "http://localhost/cb")
    with pytest.raises(GoogleCalendarError, match="not configured"):
        client.get_authorization_url(state="x")


def test_task_event_is_one_hour_with_reminders():
    due = datetime(2026, 3, 2, 14, 0, tzinfo=timezone.utc)
    body = task_event_body("Inspection", None, due, "America/Chicago", with_reminders=True)

    assert body["summary"] == "Inspection"
    assert body["description"] == ""
    assert body["start"] == {"dateTime": "2026-03-02T14:00:00+00:00", "timeZone": "America/Chicago"}
    assert body["end"]["dateTime"] == "2026-03-02T15:00:00+00:00"
    assert body["reminders"]["useDefault"] is False
    assert [o["minutes"] for o in body["reminders"]["overrides"]] == [15, 60]


def test_task_event_update_has_no_reminders():
    due = datetime(2026, 3, 2, 14, 0)
    body = task_event_body("Inspection", "Bring ladder", due, "UTC")
    assert "reminders" not in body
    assert body["start"]["dateTime"].endswith("+00:00")


@pytest.mark.asyncio
async def test_exchange_code_returns_tokens(google_client, http):
    factory, instance = http.mock(http.response(200, {
        "access_token": "at",
        "refresh_token": "rt",
        "expires_in": 3599,
        "scope": "calendar",
    }))
    with patch("httpx.AsyncClient", factory):
        tokens = await google_client.exchange_code("auth-code")

    assert tokens.access_token == "at"
    assert tokens.refresh_token == "rt"
    stored = tokens.to_storage_data()
    assert stored["expires_at"] == tokens.expires_at
    data = instance.post.call_args.kwargs["data"]
    assert data["grant_type"] == "authorization_code"
    assert data["code"] == "auth-code"


@pytest.mark.asyncio
async def test_exchange_code_error_uses_provider_description(google_client, http):
    factory, _ = http.mock(http.response(400, {"error": "invalid_grant", "error_description": "Bad Request"}))
    with patch("httpx.AsyncClient", factory):
        with pytest.raises(GoogleCalendarError) as excinfo:
            await google_client.exchange_code("stale")
    assert excinfo.value.message == "Bad Request"
    assert excinfo.value.error_code == "invalid_grant"


@pytest.mark.asyncio
async def test_list_events_follows_pages(google_client, http):
    factory, instance = http.mock(
        http.response(200, {"items": [{"id": "a"}], "nextPageToken": "p2"}),
        http.response(200, {"items": [{"id": "b"}]}),
    )
    with patch("httpx.AsyncClient", factory):
        events = await google_client.list_events("tok", "2026-01-01T00:00:00Z", "2026-02-01T00:00:00Z")

    assert [e["id"] for e in events] == ["a", "b"]
    assert instance.get.await_count == 2
    assert instance.get.call_args.kwargs["params"]["pageToken"] == "p2"
    assert instance.get.call_args.kwargs["headers"]["Authorization"] == "Bearer tok"


@pytest.mark.asyncio
async def test_update_event_puts_to_event_url(google_client, http):
    factory, instance = http.mock(http.response(200, {"id": "evt/1"}))
    with patch("httpx.AsyncClient", factory):
        await google_client.update_event("tok", "evt/1", {"summary": "Moved"})

    url = instance.put.call_args.args[0]
    assert url.endswith("/calendars/primary/events/evt%2F1")
    assert instance.put.call_args.kwargs["json"] == {"summary": "Moved"}
