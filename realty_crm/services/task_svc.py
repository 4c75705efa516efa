"""Task service."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError
from ..models.base import utcnow
from ..models.task import Task
from .common import coerce_datetime


def _ordered(stmt):
    return stmt.order_by(Task.due_date.asc().nullslast(), Task.sort_order.asc(), Task.created_at.asc())


async def get_tasks_by_contact(db: AsyncSession, contact_id: uuid.UUID) -> list[Task]:
    result = await db.execute(_ordered(select(Task).where(Task.contact_id == contact_id)))
    return list(result.scalars().all())


async def get_tasks_by_user(
    db: AsyncSession, user_id: uuid.UUID, *, status: str | None = None
) -> list[Task]:
    stmt = select(Task).where(Task.assigned_user_id == user_id)
    if status:
        stmt = stmt.where(Task.status == status)
    result = await db.execute(_ordered(stmt))
    return list(result.scalars().all())


async def get_task(
    db: AsyncSession, task_id: uuid.UUID, *, user_id: uuid.UUID | None = None
) -> Task | None:
    stmt = select(Task).where(Task.id == task_id)
    if user_id:
        stmt = stmt.where(Task.assigned_user_id == user_id)
    return (await db.execute(stmt)).scalar_one_or_none()


async def create_task(db: AsyncSession, assigned_user_id: uuid.UUID, **kwargs) -> Task:
    kwargs.pop("id", None)
    if "due_date" in kwargs:
        kwargs["due_date"] = coerce_datetime(kwargs.get("due_date"))
    if kwargs.get("status") == "completed" and not kwargs.get("completed_at"):
        kwargs["completed_at"] = utcnow()
    task = Task(assigned_user_id=assigned_user_id, **kwargs)
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task


async def update_task(
    db: AsyncSession, task_id: uuid.UUID, *, user_id: uuid.UUID | None = None, **kwargs
) -> Task:
    """Update an existing task in place.

    The row keeps its id; an unknown id raises ``NotFoundError`` rather than
    inserting a new task.
    """
    task = await get_task(db, task_id, user_id=user_id)
    if not task:
        raise NotFoundError(f"Task {task_id} not found")
    kwargs.pop("id", None)
    if "due_date" in kwargs:
        kwargs["due_date"] = coerce_datetime(kwargs.get("due_date"))
    new_status = kwargs.get("status")
    if new_status == "completed" and task.status != "completed":
        kwargs.setdefault("completed_at", utcnow())
    elif new_status and new_status != "completed":
        kwargs.setdefault("completed_at", None)
    for key, value in kwargs.items():
        setattr(task, key, value)
    task.updated_at = utcnow()
    await db.commit()
    await db.refresh(task)
    return task


async def delete_task(
    db: AsyncSession, task_id: uuid.UUID, *, user_id: uuid.UUID | None = None
) -> bool:
    task = await get_task(db, task_id, user_id=user_id)
    if not task:
        return False
    await db.delete(task)
    await db.commit()
    return True


async def mark_task_complete(
    db: AsyncSession, task_id: uuid.UUID, *, user_id: uuid.UUID | None = None
) -> Task:
    return await update_task(
        db, task_id, user_id=user_id, status="completed", completed_at=utcnow()
    )


async def reorder_tasks(
    db: AsyncSession,
    user_id: uuid.UUID,
    status: str,
    ordered_ids: list[uuid.UUID],
) -> list[Task]:
    """Rewrite sort_order for one status column.

    Tasks dropped into the column from elsewhere take its status. Ids that do
    not belong to the user are ignored.
    """
    if not ordered_ids:
        return []
    stmt = select(Task).where(Task.assigned_user_id == user_id, Task.id.in_(ordered_ids))
    by_id = {t.id: t for t in (await db.execute(stmt)).scalars().all()}
    now = utcnow()
    ordered: list[Task] = []
    for position, task_id in enumerate(ordered_ids):
        task = by_id.get(task_id)
        if task is None:
            continue
        if task.status != status:
            task.status = status
            task.completed_at = now if status == "completed" else None
        task.sort_order = position
        task.updated_at = now
        ordered.append(task)
    await db.commit()
    return ordered
