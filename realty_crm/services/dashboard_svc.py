"""Dashboard aggregations - deal pipeline, task load and recent changes."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.base import utcnow
from ..models.contact import Contact
from ..models.deal import ACTIVE_DEAL_STATUSES, DEAL_STATUSES, Deal
from ..models.task import Task
from .common import as_utc

HOT_DEAL_STATUSES = ("proposal", "negotiation")
HOT_DEAL_PROBABILITY = 80
SIDEBAR_LIMIT = 5


def _day_bounds(now: datetime) -> tuple[datetime, datetime]:
    start = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


async def get_dashboard_stats(
    db: AsyncSession, user_id: uuid.UUID, *, now: datetime | None = None
) -> dict:
    now = as_utc(now) or utcnow()
    week_ago = now - timedelta(days=7)
    day_start, day_end = _day_bounds(now)

    deal_rows = (
        await db.execute(
            select(Deal.price, Deal.created_at).where(
                Deal.assigned_agent_id == user_id,
                Deal.status.in_(ACTIVE_DEAL_STATUSES),
            )
        )
    ).all()
    active_value = float(sum(r.price or 0 for r in deal_rows))
    # Baseline: active deals that already existed a week ago.
    baseline_value = float(
        sum(r.price or 0 for r in deal_rows if as_utc(r.created_at) < week_ago)
    )
    trend = ((active_value - baseline_value) / baseline_value) * 100 if baseline_value > 0 else 0.0

    task_rows = (
        await db.execute(
            select(Task.due_date).where(
                Task.assigned_user_id == user_id, Task.status != "completed"
            )
        )
    ).all()
    overdue = sum(1 for r in task_rows if r.due_date and as_utc(r.due_date) < now)

    contact_rows = (
        await db.execute(select(Contact.created_at).where(Contact.assigned_agent_id == user_id))
    ).all()
    this_week = sum(1 for r in contact_rows if as_utc(r.created_at) >= week_ago)

    today_tasks = list(
        (
            await db.execute(
                select(Task)
                .where(
                    Task.assigned_user_id == user_id,
                    Task.due_date >= day_start,
                    Task.due_date < day_end,
                )
                .order_by(Task.due_date.asc(), Task.sort_order.asc())
            )
        )
        .scalars()
        .all()
    )

    return {
        "active_deals": {"count": len(deal_rows), "total_value": active_value, "trend": trend},
        "pending_tasks": {"count": len(task_rows), "overdue_count": overdue},
        "new_contacts": {"count": len(contact_rows), "this_week": this_week},
        "today_events": {"count": len(today_tasks), "tasks": today_tasks},
    }


async def get_pipeline_data(db: AsyncSession, user_id: uuid.UUID) -> dict[str, dict]:
    pipeline = {status: {"count": 0, "value": 0.0} for status in DEAL_STATUSES}
    rows = (
        await db.execute(select(Deal.status, Deal.price).where(Deal.assigned_agent_id == user_id))
    ).all()
    for row in rows:
        bucket = pipeline.get(row.status)
        if bucket is None:
            continue
        bucket["count"] += 1
        bucket["value"] += float(row.price or 0)
    return pipeline


async def get_recent_activity(db: AsyncSession, user_id: uuid.UUID, limit: int = 10) -> list[dict]:
    """Latest updated deals, contacts and tasks merged newest first."""
    items: list[dict] = []

    deals = (
        await db.execute(
            select(Deal)
            .where(Deal.assigned_agent_id == user_id)
            .options(selectinload(Deal.contact))
            .order_by(Deal.updated_at.desc())
            .limit(SIDEBAR_LIMIT)
        )
    ).scalars().all()
    for deal in deals:
        items.append({
            "id": str(deal.id),
            "type": "deal",
            "title": f"Deal updated: {deal.title}",
            "description": f'Deal "{deal.title}" was updated',
            "timestamp": as_utc(deal.updated_at),
            "related_entity": (
                {"id": str(deal.contact.id), "name": deal.contact.full_name, "type": "contact"}
                if deal.contact else None
            ),
        })

    contacts = (
        await db.execute(
            select(Contact)
            .where(Contact.assigned_agent_id == user_id)
            .order_by(Contact.updated_at.desc())
            .limit(SIDEBAR_LIMIT)
        )
    ).scalars().all()
    for contact in contacts:
        name = f"{contact.first_name} {contact.last_name}"
        items.append({
            "id": str(contact.id),
            "type": "contact",
            "title": f"Contact updated: {name}",
            "description": f'Contact "{name}" was updated',
            "timestamp": as_utc(contact.updated_at),
            "related_entity": None,
        })

    tasks = (
        await db.execute(
            select(Task)
            .where(Task.assigned_user_id == user_id)
            .order_by(Task.updated_at.desc())
            .limit(SIDEBAR_LIMIT)
        )
    ).scalars().all()
    for task in tasks:
        items.append({
            "id": str(task.id),
            "type": "task",
            "title": f"Task updated: {task.title}",
            "description": f'Task "{task.title}" was updated',
            "timestamp": as_utc(task.updated_at),
            "related_entity": None,
        })

    items.sort(key=lambda item: item["timestamp"], reverse=True)
    return items[:limit]


async def get_overdue_tasks(
    db: AsyncSession, user_id: uuid.UUID, *, now: datetime | None = None
) -> list[Task]:
    """Open tasks due before today, oldest first."""
    day_start, _ = _day_bounds(as_utc(now) or utcnow())
    stmt = (
        select(Task)
        .where(
            Task.assigned_user_id == user_id,
            Task.status != "completed",
            Task.due_date.is_not(None),
            Task.due_date < day_start,
        )
        .order_by(Task.due_date.asc())
        .limit(SIDEBAR_LIMIT)
    )
    return list((await db.execute(stmt)).scalars().all())


async def get_hot_deals(
    db: AsyncSession, user_id: uuid.UUID, *, today: date | None = None
) -> list[Deal]:
    """Late-stage deals closing within a week or at high probability."""
    cutoff = (today or utcnow().date()) + timedelta(days=7)
    stmt = (
        select(Deal)
        .where(
            Deal.assigned_agent_id == user_id,
            Deal.status.in_(HOT_DEAL_STATUSES),
            or_(
                and_(Deal.expected_close_date.is_not(None), Deal.expected_close_date < cutoff),
                Deal.probability >= HOT_DEAL_PROBABILITY,
            ),
        )
        .options(selectinload(Deal.contact))
        .order_by(Deal.expected_close_date.asc().nullslast())
        .limit(SIDEBAR_LIMIT)
    )
    return list((await db.execute(stmt)).scalars().all())
