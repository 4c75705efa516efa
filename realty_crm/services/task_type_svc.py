"""Task type catalogue - built-in defaults plus per-user custom names."""

from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ValidationError
from ..models.task import DEFAULT_TASK_TYPES, CustomTaskType


async def get_custom_task_types(db: AsyncSession, user_id: uuid.UUID) -> list[CustomTaskType]:
    stmt = (
        select(CustomTaskType)
        .where(CustomTaskType.user_id == user_id)
        .order_by(CustomTaskType.name)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def create_custom_task_type(db: AsyncSession, name: str, user_id: uuid.UUID) -> CustomTaskType:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Task type name cannot be empty")

    if cleaned.lower() in {t.lower() for t in DEFAULT_TASK_TYPES}:
        raise ValidationError("Task type already exists")
    stmt = select(CustomTaskType.id).where(
        CustomTaskType.user_id == user_id,
        func.lower(CustomTaskType.name) == cleaned.lower(),
    )
    if (await db.execute(stmt)).first():
        raise ValidationError("Task type already exists")

    task_type = CustomTaskType(name=cleaned, user_id=user_id)
    db.add(task_type)
    await db.commit()
    await db.refresh(task_type)
    return task_type


async def get_all_task_types(db: AsyncSession, user_id: uuid.UUID) -> list[str]:
    """Defaults first, then custom names; duplicates dropped, order kept."""
    names = list(DEFAULT_TASK_TYPES)
    names.extend(t.name for t in await get_custom_task_types(db, user_id))
    return list(dict.fromkeys(names))
