"""Google Calendar JSON API for the signed-in agent."""

from __future__ import annotations

import uuid
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.deps import get_current_user
from ..database import get_db
from ..models.base import utcnow
from ..models.user import User
from ..schemas.task import TaskResponse
from ..services import task_svc
from ..services.google_calendar_svc import GoogleCalendarService, get_calendar_service

router = APIRouter(prefix="/api/calendar", tags=["calendar"])


class SyncRequest(BaseModel):
    days: int | None = Field(default=None, ge=1, le=366)


async def _owned_task(db: AsyncSession, task_id: uuid.UUID, user: User):
    task = await task_svc.get_task(db, task_id, user_id=user.id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.get("/status")
async def calendar_status(
    user: User = Depends(get_current_user),
    service: GoogleCalendarService = Depends(get_calendar_service),
):
    return {
        "connected": await service.is_connected(user.id),
        "sync_status": await service.get_sync_status(user.id),
    }


@router.get("/auth-url")
async def calendar_auth_url(
    user: User = Depends(get_current_user),
    service: GoogleCalendarService = Depends(get_calendar_service),
):
    return {"url": service.get_auth_url(user.id)}


@router.post("/sync", response_model=list[TaskResponse])
async def calendar_sync_now(
    data: SyncRequest | None = None,
    user: User = Depends(get_current_user),
    service: GoogleCalendarService = Depends(get_calendar_service),
):
    """Import the next N days of events (default: configured lookahead)."""
    start = utcnow()
    end = None
    if data and data.days:
        end = start + timedelta(days=data.days)
    return await service.sync_from_google_calendar(user.id, start, end)


@router.post("/disconnect")
async def calendar_disconnect(
    user: User = Depends(get_current_user),
    service: GoogleCalendarService = Depends(get_calendar_service),
):
    await service.disconnect_google_calendar(user.id)
    return {"success": True}


@router.post("/tasks/{task_id}/event")
async def push_task_event(
    task_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: GoogleCalendarService = Depends(get_calendar_service),
):
    task = await _owned_task(db, task_id, user)
    return {"eventId": await service.sync_task_to_google_calendar(user.id, task)}


@router.put("/tasks/{task_id}/event")
async def update_task_event(
    task_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: GoogleCalendarService = Depends(get_calendar_service),
):
    task = await _owned_task(db, task_id, user)
    if not task.google_calendar_event_id:
        raise HTTPException(status_code=409, detail="Task is not linked to a calendar event")
    await service.update_google_calendar_event(user.id, task, task.google_calendar_event_id)
    return {"success": True}


@router.delete("/tasks/{task_id}/event")
async def delete_task_event(
    task_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: GoogleCalendarService = Depends(get_calendar_service),
):
    task = await _owned_task(db, task_id, user)
    if not task.google_calendar_event_id:
        raise HTTPException(status_code=409, detail="Task is not linked to a calendar event")
    await service.delete_google_calendar_event(user.id, task.google_calendar_event_id)
    await task_svc.update_task(db, task.id, user_id=user.id, google_calendar_event_id=None)
    return {"success": True}
