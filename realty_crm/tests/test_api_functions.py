"""Test the calendar function endpoints."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from httpx import AsyncClient

from realty_crm.services import task_svc

AUTH_URL = "/functions/v1/google-calendar-auth"
SYNC_URL = "/functions/v1/google-calendar-sync"


@pytest.mark.asyncio
async def test_preflight_returns_ok_with_cors(client: AsyncClient):
    resp = await client.options(SYNC_URL)
    assert resp.status_code == 200
    assert resp.text == "ok"
    assert resp.headers["access-control-allow-origin"] == "*"
    assert "apikey" in resp.headers["access-control-allow-headers"]


@pytest.mark.asyncio
async def test_requires_session(client: AsyncClient, user):
    resp = await client.post(AUTH_URL, json={"userId": str(user.id), "action": "getAuthUrl"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_get_auth_url(auth_client: AsyncClient, user):
    resp = await auth_client.post(AUTH_URL, json={"userId": str(user.id), "action": "getAuthUrl"})
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
    url = resp.json()["url"]
    assert "access_type=offline" in url
    assert f"state={user.id}" in url


@pytest.mark.asyncio
async def test_unknown_action_is_400(auth_client: AsyncClient, user):
    resp = await auth_client.post(AUTH_URL, json={"userId": str(user.id), "action": "explode"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid action"}


@pytest.mark.asyncio
async def test_other_users_id_is_forbidden(auth_client: AsyncClient, other_user):
    resp = await auth_client.post(AUTH_URL, json={"userId": str(other_user.id), "action": "getAuthUrl"})
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_sync_without_connection_is_500(auth_client: AsyncClient, user):
    resp = await auth_client.post(SYNC_URL, json={
        "userId": str(user.id),
        "action": "syncFromCalendar",
        "startDate": "2026-06-01T00:00:00Z",
        "endDate": "2026-06-30T00:00:00Z",
    })
    assert resp.status_code == 500
    assert resp.json() == {"error": "Google Calendar not connected"}


@pytest.mark.asyncio
async def test_exchange_code_connects_user(auth_client: AsyncClient, user, http):
    factory, _ = http.mock(http.response(200, {"access_token": "at", "refresh_token": "rt", "expires_in": 3600}))
    with patch("httpx.AsyncClient", factory):
        resp = await auth_client.post(AUTH_URL, json={
            "userId": str(user.id), "action": "exchangeCode", "code": "abc",
        })
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    status = await auth_client.get("/api/calendar/status")
    assert status.json()["connected"] is True


@pytest.mark.asyncio
async def test_sync_from_calendar_returns_events(auth_client: AsyncClient, connected_user, http):
    factory, _ = http.mock(http.response(200, {"items": [
        {"id": "evt-1", "summary": "Buyer consult", "start": {"dateTime": "2026-06-03T10:00:00Z"}},
    ]}))
    payload = {
        "userId": str(connected_user.id),
        "action": "syncFromCalendar",
        "startDate": "2026-06-01T00:00:00Z",
        "endDate": "2026-06-30T00:00:00Z",
    }
    with patch("httpx.AsyncClient", factory):
        resp = await auth_client.post(SYNC_URL, json=payload)

    assert resp.status_code == 200
    [event] = resp.json()["events"]
    assert event["title"] == "Buyer consult"
    assert event["google_calendar_event_id"] == "evt-1"
    assert event["status"] == "pending"


@pytest.mark.asyncio
async def test_create_event_returns_event_id(auth_client: AsyncClient, connected_user, http):
    factory, instance = http.mock(http.response(200, {"id": "evt-42"}))
    with patch("httpx.AsyncClient", factory):
        resp = await auth_client.post(SYNC_URL, json={
            "userId": str(connected_user.id),
            "action": "createEvent",
            "event": {"summary": "Walkthrough"},
        })
    assert resp.status_code == 200
    assert resp.json() == {"eventId": "evt-42"}
    assert instance.post.call_args.kwargs["headers"]["Authorization"] == "Bearer stored-access"


@pytest.mark.asyncio
async def test_create_event_for_another_agents_task_is_refused(
    auth_client: AsyncClient, db, connected_user, other_user, http
):
    task = await task_svc.create_task(db, other_user.id, title="Their listing appointment")
    task_id = task.id
    factory, instance = http.mock(http.response(200, {"id": "evt-hijack"}))
    with patch("httpx.AsyncClient", factory):
        resp = await auth_client.post(SYNC_URL, json={
            "userId": str(connected_user.id),
            "action": "createEvent",
            "taskId": str(task_id),
            "event": {"summary": "Walkthrough"},
        })

    assert resp.status_code == 500
    assert resp.json() == {"error": f"Task {task_id} not found"}
    instance.post.assert_not_called()
    await db.refresh(task)
    assert task.google_calendar_event_id is None


@pytest.mark.asyncio
async def test_create_event_links_own_task(auth_client: AsyncClient, db, connected_user, http):
    task = await task_svc.create_task(db, connected_user.id, title="Buyer consultation")
    factory, _ = http.mock(http.response(200, {"id": "evt-mine"}))
    with patch("httpx.AsyncClient", factory):
        resp = await auth_client.post(SYNC_URL, json={
            "userId": str(connected_user.id),
            "action": "createEvent",
            "taskId": str(task.id),
            "event": {"summary": "Buyer consultation"},
        })

    assert resp.json() == {"eventId": "evt-mine"}
    await db.refresh(task)
    assert task.google_calendar_event_id == "evt-mine"
