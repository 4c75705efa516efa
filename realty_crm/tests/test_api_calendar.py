"""Test the calendar JSON API, OAuth callback and settings page."""

from __future__ import annotations

from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import pytest
from httpx import AsyncClient

from realty_crm.services import task_svc


@pytest.mark.asyncio
async def test_status_when_not_connected(auth_client: AsyncClient):
    resp = await auth_client.get("/api/calendar/status")
    assert resp.status_code == 200
    assert resp.json() == {"connected": False, "sync_status": None}


@pytest.mark.asyncio
async def test_auth_url_carries_user_id(auth_client: AsyncClient, user):
    resp = await auth_client.get("/api/calendar/auth-url")
    qs = parse_qs(urlparse(resp.json()["url"]).query)
    assert qs["state"] == [str(user.id)]


@pytest.mark.asyncio
async def test_callback_connects_and_redirects(auth_client: AsyncClient, user, http):
    factory, _ = http.mock(http.response(200, {"access_token": "at", "refresh_token": "rt", "expires_in": 3600}))
    with patch("httpx.AsyncClient", factory):
        resp = await auth_client.get(
            "/auth/callback", params={"code": "c0de", "state": str(user.id)}, follow_redirects=False
        )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard/settings?calendar=connected"


@pytest.mark.asyncio
async def test_callback_error_is_reported(auth_client: AsyncClient):
    resp = await auth_client.get("/auth/callback", params={"error": "access_denied"}, follow_redirects=False)
    assert resp.status_code == 303
    location = urlparse(resp.headers["location"])
    assert location.path == "/dashboard/settings"
    assert parse_qs(location.query) == {"calendar": ["error"], "message": ["access_denied"]}


@pytest.mark.asyncio
async def test_callback_without_session_does_not_connect(client: AsyncClient, user, http):
    user_id = user.id
    factory, instance = http.mock(http.response(200, {"access_token": "at", "expires_in": 3600}))
    with patch("httpx.AsyncClient", factory):
        resp = await client.get(
            "/auth/callback", params={"code": "c0de", "state": str(user_id)}, follow_redirects=False
        )

    assert resp.status_code == 303
    query = parse_qs(urlparse(resp.headers["location"]).query)
    assert query["calendar"] == ["error"]
    instance.post.assert_not_called()


@pytest.mark.asyncio
async def test_callback_for_other_user_is_refused(auth_client: AsyncClient, other_user, http):
    factory, instance = http.mock(http.response(200, {"access_token": "at", "expires_in": 3600}))
    with patch("httpx.AsyncClient", factory):
        resp = await auth_client.get(
            "/auth/callback", params={"code": "c0de", "state": str(other_user.id)}, follow_redirects=False
        )

    query = parse_qs(urlparse(resp.headers["location"]).query)
    assert query["calendar"] == ["error"]
    instance.post.assert_not_called()


@pytest.mark.asyncio
async def test_settings_page_shows_connection(auth_client: AsyncClient, connected_user):
    resp = await auth_client.get("/dashboard/settings", params={"calendar": "connected"})
    assert resp.status_code == 200
    assert "Google Calendar connected." in resp.text
    assert "Disconnect" in resp.text


@pytest.mark.asyncio
async def test_sync_now_imports_events(auth_client: AsyncClient, connected_user, http):
    factory, instance = http.mock(http.response(200, {"items": [
        {"id": "evt-1", "summary": "Listing appointment", "start": {"dateTime": "2026-11-02T17:00:00Z"}},
    ]}))
    with patch("httpx.AsyncClient", factory):
        resp = await auth_client.post("/api/calendar/sync", json={"days": 30})

    assert resp.status_code == 200
    [task] = resp.json()
    assert task["title"] == "Listing appointment"
    assert task["type"] == "appointment"

    status = (await auth_client.get("/api/calendar/status")).json()
    assert status["connected"] is True
    assert status["sync_status"]["syncEnabled"] is True


@pytest.mark.asyncio
async def test_push_task_to_calendar(auth_client: AsyncClient, db, connected_user, http):
    task = await task_svc.create_task(
        db, connected_user.id, title="Final walkthrough", due_date="2026-11-05T14:00:00Z"
    )
    factory, instance = http.mock(http.response(200, {"id": "evt-77"}))
    with patch("httpx.AsyncClient", factory):
        resp = await auth_client.post(f"/api/calendar/tasks/{task.id}/event")

    assert resp.json() == {"eventId": "evt-77"}
    body = instance.post.call_args.kwargs["json"]
    assert body["summary"] == "Final walkthrough"
    assert body["reminders"]["useDefault"] is False

    fetched = (await auth_client.get(f"/api/tasks/{task.id}")).json()
    assert fetched["google_calendar_event_id"] == "evt-77"


@pytest.mark.asyncio
async def test_disconnect(auth_client: AsyncClient, connected_user):
    resp = await auth_client.post("/api/calendar/disconnect")
    assert resp.json() == {"success": True}
    assert (await auth_client.get("/api/calendar/status")).json()["connected"] is False


@pytest.mark.asyncio
async def test_dashboard_page_renders(auth_client: AsyncClient, user):
    resp = await auth_client.get("/dashboard")
    assert resp.status_code == 200
    assert "Welcome back, Alex Agent" in resp.text

    stats = (await auth_client.get("/api/dashboard/stats")).json()
    assert stats["active_deals"]["count"] == 0
    assert stats["today_events"] == {"count": 0, "tasks": []}
