"""Request-scoped Google Calendar facade used by the routers and the CLI."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import RealtySettings, settings
from ..database import get_db
from ..google.client import GoogleCalendarClient, task_event_body
from ..models.base import utcnow
from ..models.task import Task
from ..models.user import UserSettings
from . import calendar_sync_svc
from .common import as_utc

logger = logging.getLogger(__name__)


class GoogleCalendarService:
    """Task <-> event translation plus connection and sync status.

    One instance per request; it holds the request's session and a client
    built from settings.
    """

    def __init__(
        self,
        db: AsyncSession,
        client: GoogleCalendarClient | None = None,
        settings_obj: RealtySettings | None = None,
    ):
        self.db = db
        self.settings = settings_obj or settings
        self.client = client or GoogleCalendarClient.from_settings(self.settings)

    def _event_for(self, task: Task, *, with_reminders: bool) -> dict:
        return task_event_body(
            task.title,
            task.description,
            as_utc(task.due_date),
            self.settings.calendar_default_timezone,
            with_reminders=with_reminders,
        )

    def get_auth_url(self, user_id: uuid.UUID) -> str:
        return calendar_sync_svc.get_auth_url(self.client, user_id)

    async def exchange_code_for_token(self, user_id: uuid.UUID, code: str) -> None:
        await calendar_sync_svc.exchange_code(self.db, self.client, user_id, code)

    async def is_connected(self, user_id: uuid.UUID) -> bool:
        try:
            row = await calendar_sync_svc.get_user_settings(self.db, user_id)
        except Exception:
            logger.exception("Error checking Google Calendar connection for %s", user_id)
            return False
        return bool(row and row.google_calendar_connected)

    async def sync_task_to_google_calendar(self, user_id: uuid.UUID, task: Task) -> str | None:
        """Create an event for the task. Tasks without a due date are skipped."""
        if not task.due_date:
            return None
        access_token = await calendar_sync_svc.get_access_token(self.db, self.client, user_id)
        return await calendar_sync_svc.create_event(
            self.db,
            self.client,
            access_token,
            self._event_for(task, with_reminders=True),
            task_id=task.id,
            user_id=user_id,
        )

    async def update_google_calendar_event(
        self, user_id: uuid.UUID, task: Task, event_id: str
    ) -> None:
        if not task.due_date:
            return
        access_token = await calendar_sync_svc.get_access_token(self.db, self.client, user_id)
        await calendar_sync_svc.update_event(
            self.client, access_token, event_id, self._event_for(task, with_reminders=False)
        )

    async def delete_google_calendar_event(self, user_id: uuid.UUID, event_id: str) -> None:
        access_token = await calendar_sync_svc.get_access_token(self.db, self.client, user_id)
        await calendar_sync_svc.delete_event(self.client, access_token, event_id)

    async def sync_from_google_calendar(
        self,
        user_id: uuid.UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Task]:
        """Import events; defaults to now through the configured lookahead."""
        start = start or utcnow()
        end = end or start + timedelta(days=self.settings.calendar_sync_lookahead_days)
        access_token = await calendar_sync_svc.get_access_token(self.db, self.client, user_id)
        return await calendar_sync_svc.sync_from_calendar(
            self.db, self.client, access_token, user_id, start, end
        )

    async def get_sync_status(self, user_id: uuid.UUID) -> dict | None:
        try:
            row = await calendar_sync_svc.get_user_settings(self.db, user_id)
        except Exception:
            logger.exception("Error getting sync status for %s", user_id)
            return None
        return row.google_calendar_sync_status if row else None

    async def update_sync_status(self, user_id: uuid.UUID, status: dict) -> None:
        row = await calendar_sync_svc.get_user_settings(self.db, user_id)
        if row is None:
            row = UserSettings(user_id=user_id)
            self.db.add(row)
        row.google_calendar_sync_status = dict(status)
        row.updated_at = utcnow()
        await self.db.commit()

    async def disconnect_google_calendar(self, user_id: uuid.UUID) -> None:
        await calendar_sync_svc.disconnect(self.db, user_id)


def get_google_client() -> GoogleCalendarClient:
    return GoogleCalendarClient.from_settings(settings)


async def get_calendar_service(
    db: AsyncSession = Depends(get_db),
    client: GoogleCalendarClient = Depends(get_google_client),
) -> GoogleCalendarService:
    return GoogleCalendarService(db, client)
