"""Test the Google Calendar token lifecycle and event import."""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.errors import CRMError, GoogleCalendarError, NotFoundError
from realty_crm.models.task import Task
from realty_crm.models.user import UserSettings
from realty_crm.services import calendar_sync_svc, task_svc
from realty_crm.services.calendar_sync_svc import InvalidActionError
from realty_crm.services.common import as_utc

START = datetime(2026, 6, 1, tzinfo=timezone.utc)
END = datetime(2026, 8, 30, tzinfo=timezone.utc)


def _events(*items):
    return {"items": list(items)}


def _event(event_id: str, summary: str | None = "Showing", start: str = "2026-06-10T15:00:00Z"):
    event = {"id": event_id, "start": {"dateTime": start}}
    if summary is not None:
        event["summary"] = summary
    return event


async def _settings_row(db: AsyncSession, user_id: uuid.UUID) -> UserSettings:
    db.expire_all()
    return await calendar_sync_svc.get_user_settings(db, user_id)


async def _task_count(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(Task.id)))).scalar()


@pytest.mark.asyncio
async def test_fresh_token_is_used_without_refresh(db, connected_user, google_client, http):
    factory, instance = http.mock()
    with patch("httpx.AsyncClient", factory):
        token = await calendar_sync_svc.get_access_token(db, google_client, connected_user.id)

    assert token == "stored-access"
    instance.post.assert_not_called()


@pytest.mark.asyncio
async def test_expired_token_refreshes_once_and_persists(db, connected_user, google_client, http):
    user_id = connected_user.id
    row = await _settings_row(db, user_id)
    row.google_calendar_token = {**row.google_calendar_token, "expires_at": int(time.time()) - 60}
    await db.commit()

    factory, instance = http.mock(
        http.response(200, {"access_token": "new-access", "expires_in": 3600, "token_type": "Bearer"})
    )
    with patch("httpx.AsyncClient", factory):
        token = await calendar_sync_svc.get_access_token(db, google_client, user_id)

    assert token == "new-access"
    assert instance.post.await_count == 1
    sent = instance.post.call_args.kwargs["data"]
    assert sent["grant_type"] == "refresh_token"
    assert sent["refresh_token"] == "stored-refresh"

    stored = (await _settings_row(db, user_id)).google_calendar_token
    assert stored["access_token"] == "new-access"
    assert stored["expires_at"] > time.time()
    assert stored["refresh_token"] == "stored-refresh"


@pytest.mark.asyncio
async def test_missing_expiry_counts_as_expired(db, connected_user, google_client, http):
    user_id = connected_user.id
    row = await _settings_row(db, user_id)
    token = dict(row.google_calendar_token)
    token.pop("expires_at")
    row.google_calendar_token = token
    await db.commit()

    factory, instance = http.mock(http.response(200, {"access_token": "new-access", "expires_in": 3600}))
    with patch("httpx.AsyncClient", factory):
        assert await calendar_sync_svc.get_access_token(db, google_client, user_id) == "new-access"
    assert instance.post.await_count == 1


@pytest.mark.asyncio
async def test_refresh_failure_surfaces_provider_message(db, connected_user, google_client, http):
    user_id = connected_user.id
    row = await _settings_row(db, user_id)
    row.google_calendar_token = {**row.google_calendar_token, "expires_at": 0}
    await db.commit()

    factory, _ = http.mock(
        http.response(400, {"error": "invalid_grant", "error_description": "Token has been revoked"})
    )
    with patch("httpx.AsyncClient", factory):
        with pytest.raises(GoogleCalendarError, match="Token has been revoked"):
            await calendar_sync_svc.get_access_token(db, google_client, user_id)


@pytest.mark.asyncio
async def test_not_connected_raises(db, user, google_client):
    with pytest.raises(GoogleCalendarError, match="Google Calendar not connected"):
        await calendar_sync_svc.get_access_token(db, google_client, user.id)


@pytest.mark.asyncio
async def test_import_creates_pending_tasks(db, user, google_client, http):
    user_id = user.id
    factory, instance = http.mock(http.response(200, _events(
        _event("evt-1", "Showing at 12 Oak St"),
        _event("evt-2", None, start="2026-06-12"),
    )))
    with patch("httpx.AsyncClient", factory):
        created = await calendar_sync_svc.sync_from_calendar(db, google_client, "tok", user_id, START, END)

    assert [t.title for t in created] == ["Showing at 12 Oak St", "Untitled Event"]
    first = created[0]
    assert first.status == "pending"
    assert first.type == "appointment"
    assert first.description == ""
    assert first.google_calendar_event_id == "evt-1"
    assert as_utc(first.due_date) == datetime(2026, 6, 10, 15, 0, tzinfo=timezone.utc)

    params = instance.get.call_args.kwargs["params"]
    assert params["timeMin"] == START.isoformat()
    assert params["timeMax"] == END.isoformat()

    status = (await _settings_row(db, user_id)).google_calendar_sync_status
    assert status["syncEnabled"] is True
    assert status["lastSync"]


@pytest.mark.asyncio
async def test_import_twice_creates_no_duplicates(db, user, google_client, http):
    payload = _events(_event("evt-1"), _event("evt-2"))
    factory, _ = http.mock(http.response(200, payload), http.response(200, payload))
    with patch("httpx.AsyncClient", factory):
        first = await calendar_sync_svc.sync_from_calendar(db, google_client, "tok", user.id, START, END)
        second = await calendar_sync_svc.sync_from_calendar(db, google_client, "tok", user.id, START, END)

    assert len(first) == 2
    assert second == []
    assert await _task_count(db) == 2


@pytest.mark.asyncio
async def test_event_already_linked_to_task_is_skipped(db, user, google_client, http):
    await task_svc.create_task(db, user.id, title="Pushed from CRM", google_calendar_event_id="evt-9")

    factory, _ = http.mock(http.response(200, _events(_event("evt-9", "Pushed from CRM"))))
    with patch("httpx.AsyncClient", factory):
        created = await calendar_sync_svc.sync_from_calendar(db, google_client, "tok", user.id, START, END)

    assert created == []
    assert await _task_count(db) == 1


@pytest.mark.asyncio
async def test_duplicate_ids_within_one_batch(db, user, google_client, http):
    factory, _ = http.mock(http.response(200, _events(_event("evt-1"), _event("evt-1"))))
    with patch("httpx.AsyncClient", factory):
        created = await calendar_sync_svc.sync_from_calendar(db, google_client, "tok", user.id, START, END)
    assert len(created) == 1


@pytest.mark.asyncio
async def test_create_event_links_task(db, user, google_client, http):
    task = await task_svc.create_task(db, user.id, title="Closing", due_date=START)
    task_id, user_id = task.id, user.id
    factory, _ = http.mock(http.response(200, {"id": "evt-new"}))
    with patch("httpx.AsyncClient", factory):
        event_id = await calendar_sync_svc.create_event(
            db, google_client, "tok", {"summary": "Closing"}, task_id=task_id, user_id=user_id
        )

    assert event_id == "evt-new"
    db.expire_all()
    assert (await task_svc.get_task(db, task_id)).google_calendar_event_id == "evt-new"


@pytest.mark.asyncio
async def test_create_event_for_another_agents_task_is_rejected(db, user, other_user, google_client, http):
    task = await task_svc.create_task(db, other_user.id, title="Their closing", due_date=START)
    task_id = task.id
    factory, instance = http.mock(http.response(200, {"id": "evt-stolen"}))
    with patch("httpx.AsyncClient", factory):
        with pytest.raises(NotFoundError):
            await calendar_sync_svc.create_event(
                db, google_client, "tok", {"summary": "x"}, task_id=task_id, user_id=user.id
            )

    instance.post.assert_not_called()
    db.expire_all()
    assert (await task_svc.get_task(db, task_id)).google_calendar_event_id is None


@pytest.mark.asyncio
async def test_delete_event_failure_raises(google_client, http):
    factory, _ = http.mock(http.response(404, {"error": {"code": 404, "message": "Not Found"}}))
    with patch("httpx.AsyncClient", factory):
        with pytest.raises(GoogleCalendarError, match="Not Found"):
            await calendar_sync_svc.delete_event(google_client, "tok", "evt-x")


@pytest.mark.asyncio
async def test_disconnect_clears_token(db, connected_user):
    user_id = connected_user.id
    await calendar_sync_svc.disconnect(db, user_id)
    row = await _settings_row(db, user_id)
    assert row.google_calendar_token is None
    assert row.google_calendar_connected is False


@pytest.mark.asyncio
async def test_unknown_auth_action_rejected(db, user, google_client):
    with pytest.raises(InvalidActionError):
        await calendar_sync_svc.handle_auth_action(db, google_client, {"userId": str(user.id), "action": "nope"})


@pytest.mark.asyncio
async def test_sync_action_requires_date_range(db, connected_user, google_client):
    payload = {"userId": str(connected_user.id), "action": "syncFromCalendar"}
    with pytest.raises(CRMError, match="startDate and endDate are required"):
        await calendar_sync_svc.handle_sync_action(db, google_client, payload)
