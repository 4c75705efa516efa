"""Dashboard and settings pages plus the dashboard JSON feeds."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.deps import get_current_user
from ..config import settings
from ..database import get_db
from ..models.user import User
from ..schemas.deal import DealResponse
from ..schemas.task import TaskResponse
from ..services import dashboard_svc
from ..services.google_calendar_svc import GoogleCalendarService, get_calendar_service

router = APIRouter(tags=["dashboard"])
templates = Jinja2Templates(directory=str(settings.templates_dir))


def _serialize_stats(stats: dict) -> dict:
    today = stats["today_events"]
    return {
        **stats,
        "today_events": {
            "count": today["count"],
            "tasks": [TaskResponse.model_validate(t).model_dump(mode="json") for t in today["tasks"]],
        },
    }


@router.get("/dashboard")
async def dashboard_page(
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return templates.TemplateResponse(request, "dashboard.html", {
        "user": user,
        "stats": await dashboard_svc.get_dashboard_stats(db, user.id),
        "pipeline": await dashboard_svc.get_pipeline_data(db, user.id),
        "recent": await dashboard_svc.get_recent_activity(db, user.id),
        "overdue": await dashboard_svc.get_overdue_tasks(db, user.id),
        "hot_deals": await dashboard_svc.get_hot_deals(db, user.id),
    })


@router.get("/dashboard/settings")
async def settings_page(
    request: Request,
    calendar: str | None = None,
    message: str | None = None,
    user: User = Depends(get_current_user),
    service: GoogleCalendarService = Depends(get_calendar_service),
):
    return templates.TemplateResponse(request, "settings.html", {
        "user": user,
        "calendar_flag": calendar,
        "calendar_message": message,
        "google_configured": settings.google_configured,
        "connected": await service.is_connected(user.id),
        "sync_status": await service.get_sync_status(user.id),
        "lookahead_days": settings.calendar_sync_lookahead_days,
    })


@router.get("/api/dashboard/stats")
async def dashboard_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return _serialize_stats(await dashboard_svc.get_dashboard_stats(db, user.id))


@router.get("/api/dashboard/pipeline")
async def dashboard_pipeline(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await dashboard_svc.get_pipeline_data(db, user.id)


@router.get("/api/dashboard/recent-activity")
async def dashboard_recent_activity(
    limit: int = 10,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await dashboard_svc.get_recent_activity(db, user.id, limit=limit)


@router.get("/api/dashboard/overdue-tasks", response_model=list[TaskResponse])
async def dashboard_overdue_tasks(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await dashboard_svc.get_overdue_tasks(db, user.id)


@router.get("/api/dashboard/hot-deals", response_model=list[DealResponse])
async def dashboard_hot_deals(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await dashboard_svc.get_hot_deals(db, user.id)
