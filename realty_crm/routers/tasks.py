"""Task and task type JSON API."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.deps import get_current_user
from ..database import get_db
from ..models.user import User
from ..schemas.task import TaskCreate, TaskReorder, TaskResponse, TaskTypeCreate, TaskUpdate
from ..services import task_svc, task_type_svc

router = APIRouter(prefix="/api", tags=["tasks"])


@router.get("/tasks", response_model=list[TaskResponse])
async def list_tasks(
    status: str | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await task_svc.get_tasks_by_user(db, user.id, status=status)


@router.post("/tasks", response_model=TaskResponse, status_code=201)
async def create_task(
    data: TaskCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await task_svc.create_task(db, user.id, **data.model_dump())


@router.post("/tasks/reorder", response_model=list[TaskResponse])
async def reorder_tasks(
    data: TaskReorder,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await task_svc.reorder_tasks(db, user.id, data.status, data.task_ids)


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await task_svc.get_task(db, task_id, user_id=user.id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: uuid.UUID,
    data: TaskUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await task_svc.update_task(
        db, task_id, user_id=user.id, **data.model_dump(exclude_unset=True)
    )


@router.post("/tasks/{task_id}/complete", response_model=TaskResponse)
async def complete_task(
    task_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await task_svc.mark_task_complete(db, task_id, user_id=user.id)


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await task_svc.delete_task(db, task_id, user_id=user.id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"ok": True}


@router.get("/task-types")
async def list_task_types(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"types": await task_type_svc.get_all_task_types(db, user.id)}


@router.post("/task-types", status_code=201)
async def create_task_type(
    data: TaskTypeCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task_type = await task_type_svc.create_custom_task_type(db, data.name, user.id)
    return {"id": str(task_type.id), "name": task_type.name}
