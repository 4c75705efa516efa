"""Activity service - the per-contact timeline of calls, meetings and notes."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.activity import Activity
from ..models.base import utcnow
from .common import coerce_datetime


async def get_by_contact(db: AsyncSession, contact_id: uuid.UUID) -> list[Activity]:
    stmt = (
        select(Activity)
        .where(Activity.contact_id == contact_id)
        .order_by(Activity.occurred_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_by_user(db: AsyncSession, user_id: uuid.UUID, *, limit: int = 50) -> list[Activity]:
    stmt = (
        select(Activity)
        .where(Activity.user_id == user_id)
        .order_by(Activity.occurred_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_activity(
    db: AsyncSession, activity_id: uuid.UUID, *, user_id: uuid.UUID | None = None
) -> Activity | None:
    stmt = select(Activity).where(Activity.id == activity_id)
    if user_id:
        stmt = stmt.where(Activity.user_id == user_id)
    return (await db.execute(stmt)).scalar_one_or_none()


async def create(db: AsyncSession, user_id: uuid.UUID, **kwargs) -> Activity:
    kwargs["occurred_at"] = coerce_datetime(kwargs.get("occurred_at")) or utcnow()
    activity = Activity(user_id=user_id, **kwargs)
    db.add(activity)
    await db.commit()
    await db.refresh(activity)
    return activity


async def update(
    db: AsyncSession, activity_id: uuid.UUID, *, user_id: uuid.UUID | None = None, **kwargs
) -> Activity | None:
    activity = await get_activity(db, activity_id, user_id=user_id)
    if not activity:
        return None
    if "occurred_at" in kwargs:
        kwargs["occurred_at"] = coerce_datetime(kwargs["occurred_at"]) or activity.occurred_at
    for key, value in kwargs.items():
        setattr(activity, key, value)
    activity.updated_at = utcnow()
    await db.commit()
    await db.refresh(activity)
    return activity


async def remove(
    db: AsyncSession, activity_id: uuid.UUID, *, user_id: uuid.UUID | None = None
) -> bool:
    activity = await get_activity(db, activity_id, user_id=user_id)
    if not activity:
        return False
    await db.delete(activity)
    await db.commit()
    return True
