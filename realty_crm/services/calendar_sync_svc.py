"""Server side of the Google Calendar integration.

Holds the token lifecycle (connect, refresh, disconnect), event
create/update/delete on behalf of a user, and the calendar -> task import.
The ``handle_*_action`` functions dispatch the ``{userId, action, ...}``
payloads posted to the function endpoints.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import CRMError, GoogleCalendarError, NotFoundError
from ..google.client import GoogleCalendarClient
from ..models.base import utcnow
from ..models.task import Task
from ..models.user import UserSettings
from .common import as_utc, coerce_datetime

logger = logging.getLogger(__name__)

AUTH_ACTIONS = ("getAuthUrl", "exchangeCode", "disconnect")
SYNC_ACTIONS = ("createEvent", "updateEvent", "deleteEvent", "syncFromCalendar")
IMPORTED_TASK_TYPE = "appointment"
UNTITLED_EVENT = "Untitled Event"


class InvalidActionError(CRMError):
    def __init__(self, action: str | None = None):
        super().__init__("Invalid action")
        self.action = action


def _parse_user_id(raw: Any) -> uuid.UUID:
    try:
        return raw if isinstance(raw, uuid.UUID) else uuid.UUID(str(raw))
    except ValueError:
        raise CRMError("Invalid userId")


async def get_user_settings(db: AsyncSession, user_id: uuid.UUID) -> UserSettings | None:
    stmt = select(UserSettings).where(UserSettings.user_id == user_id)
    return (await db.execute(stmt)).scalar_one_or_none()


async def _get_or_create_settings(db: AsyncSession, user_id: uuid.UUID) -> UserSettings:
    row = await get_user_settings(db, user_id)
    if row is None:
        row = UserSettings(user_id=user_id)
        db.add(row)
    return row


# -- Connection & token lifecycle -------------------------------------------


def get_auth_url(client: GoogleCalendarClient, user_id: uuid.UUID) -> str:
    return client.get_authorization_url(state=str(user_id))


async def exchange_code(
    db: AsyncSession, client: GoogleCalendarClient, user_id: uuid.UUID, code: str
) -> UserSettings:
    """Swap the code for tokens and mark the user connected."""
    if not code:
        raise CRMError("Authorization code is required")
    tokens = await client.exchange_code(code)
    row = await _get_or_create_settings(db, user_id)
    row.google_calendar_token = tokens.to_storage_data()
    row.google_calendar_connected = True
    row.updated_at = utcnow()
    await db.commit()
    await db.refresh(row)
    logger.info("Google Calendar connected for user %s", user_id)
    return row


async def disconnect(db: AsyncSession, user_id: uuid.UUID) -> None:
    """Forget the stored token. The grant is not revoked with Google."""
    row = await get_user_settings(db, user_id)
    if row is None:
        return
    row.google_calendar_token = None
    row.google_calendar_connected = False
    row.google_calendar_sync_status = None
    row.updated_at = utcnow()
    await db.commit()
    logger.info("Google Calendar disconnected for user %s", user_id)


def token_is_fresh(token: dict, now: float | None = None) -> bool:
    expires_at = token.get("expires_at")
    if not isinstance(expires_at, (int, float)):
        return False
    return expires_at > (time.time() if now is None else now)


async def get_access_token(
    db: AsyncSession, client: GoogleCalendarClient, user_id: uuid.UUID
) -> str:
    """Return a usable access token, refreshing it once if expired.

    A missing ``expires_at`` counts as expired. The refreshed access token
    and expiry are persisted before returning.
    """
    row = await get_user_settings(db, user_id)
    token = row.google_calendar_token if row else None
    if not token:
        raise GoogleCalendarError("Google Calendar not connected", error_code="not_connected")

    if token_is_fresh(token):
        return token["access_token"]

    logger.info("Refreshing Google access token for user %s", user_id)
    fresh = await client.refresh_access_token(token.get("refresh_token") or "")
    updated = {**token, "access_token": fresh.access_token, "expires_at": fresh.expires_at}
    if fresh.refresh_token:
        updated["refresh_token"] = fresh.refresh_token
    row.google_calendar_token = updated
    row.updated_at = utcnow()
    await db.commit()
    return fresh.access_token


# -- Event create / update / delete -----------------------------------------


async def create_event(
    db: AsyncSession,
    client: GoogleCalendarClient,
    access_token: str,
    event: dict,
    task_id: uuid.UUID | None = None,
    *,
    user_id: uuid.UUID | None = None,
) -> str:
    """Create the event; link its id onto the task when one is given.

    With ``user_id`` the task must belong to that agent. The task is
    resolved before Google is called, so an unknown task creates no event.
    """
    task = None
    if task_id:
        stmt = select(Task).where(Task.id == task_id)
        if user_id:
            stmt = stmt.where(Task.assigned_user_id == user_id)
        task = (await db.execute(stmt)).scalar_one_or_none()
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")

    created = await client.create_event(access_token, event)
    event_id = created.get("id")
    if task is not None and event_id:
        task.google_calendar_event_id = event_id
        await db.commit()
    return event_id


async def update_event(
    client: GoogleCalendarClient, access_token: str, event_id: str, event: dict
) -> None:
    if not event_id:
        raise CRMError("eventId is required")
    await client.update_event(access_token, event_id, event)


async def delete_event(client: GoogleCalendarClient, access_token: str, event_id: str) -> None:
    if not event_id:
        raise CRMError("eventId is required")
    await client.delete_event(access_token, event_id)


# -- Import ------------------------------------------------------------------


def _event_start(event: dict) -> str | None:
    start = event.get("start") or {}
    return start.get("dateTime") or start.get("date")


async def sync_from_calendar(
    db: AsyncSession,
    client: GoogleCalendarClient,
    access_token: str,
    user_id: uuid.UUID,
    start: datetime | str,
    end: datetime | str,
) -> list[Task]:
    """Import calendar events in ``[start, end]`` as pending tasks.

    Events already linked to one of the user's tasks are skipped and never
    updated. The sync status is stamped afterwards.
    """
    time_min = start.isoformat() if isinstance(start, datetime) else str(start)
    time_max = end.isoformat() if isinstance(end, datetime) else str(end)
    events = await client.list_events(access_token, time_min, time_max)

    linked_stmt = select(Task.google_calendar_event_id).where(
        Task.assigned_user_id == user_id,
        Task.google_calendar_event_id.is_not(None),
    )
    linked = set((await db.execute(linked_stmt)).scalars().all())

    created: list[Task] = []
    for event in events:
        event_id = event.get("id")
        start_value = _event_start(event)
        if not event_id or not start_value or event_id in linked:
            continue
        task = Task(
            title=event.get("summary") or UNTITLED_EVENT,
            description=event.get("description") or "",
            due_date=coerce_datetime(start_value),
            type=IMPORTED_TASK_TYPE,
            status="pending",
            assigned_user_id=user_id,
            google_calendar_event_id=event_id,
        )
        db.add(task)
        linked.add(event_id)
        created.append(task)

    row = await _get_or_create_settings(db, user_id)
    row.google_calendar_sync_status = {
        "lastSync": utcnow().isoformat(),
        "syncEnabled": True,
    }
    row.updated_at = utcnow()
    await db.commit()
    for task in created:
        await db.refresh(task)

    logger.info(
        "Calendar import for user %s: %d events, %d new tasks", user_id, len(events), len(created)
    )
    return created


# -- Function dispatch -------------------------------------------------------


async def handle_auth_action(db: AsyncSession, client: GoogleCalendarClient, payload: dict) -> dict:
    action = payload.get("action")
    if action not in AUTH_ACTIONS:
        raise InvalidActionError(action)
    user_id = _parse_user_id(payload.get("userId"))

    if action == "getAuthUrl":
        return {"url": get_auth_url(client, user_id)}
    if action == "exchangeCode":
        await exchange_code(db, client, user_id, payload.get("code") or "")
        return {"success": True}
    await disconnect(db, user_id)
    return {"success": True}


async def handle_sync_action(db: AsyncSession, client: GoogleCalendarClient, payload: dict) -> dict:
    """Resolve (and if needed refresh) the token, then run the action."""
    user_id = _parse_user_id(payload.get("userId"))
    access_token = await get_access_token(db, client, user_id)
    action = payload.get("action")

    if action == "createEvent":
        task_id = payload.get("taskId")
        event_id = await create_event(
            db,
            client,
            access_token,
            payload.get("event") or {},
            task_id=_parse_task_id(task_id) if task_id else None,
            user_id=user_id,
        )
        return {"eventId": event_id}
    if action == "updateEvent":
        await update_event(client, access_token, payload.get("eventId") or "", payload.get("event") or {})
        return {"success": True}
    if action == "deleteEvent":
        await delete_event(client, access_token, payload.get("eventId") or "")
        return {"success": True}
    if action == "syncFromCalendar":
        if not payload.get("startDate") or not payload.get("endDate"):
            raise CRMError("startDate and endDate are required")
        tasks = await sync_from_calendar(
            db, client, access_token, user_id, payload["startDate"], payload["endDate"]
        )
        return {"events": [task_to_dict(t) for t in tasks]}
    raise InvalidActionError(action)


def _parse_task_id(raw: Any) -> uuid.UUID:
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise NotFoundError(f"Task {raw} not found")


def task_to_dict(task: Task) -> dict:
    return {
        "id": str(task.id),
        "title": task.title,
        "description": task.description,
        "due_date": as_utc(task.due_date).isoformat() if task.due_date else None,
        "type": task.type,
        "status": task.status,
        "priority": task.priority,
        "assigned_user_id": str(task.assigned_user_id),
        "google_calendar_event_id": task.google_calendar_event_id,
    }
