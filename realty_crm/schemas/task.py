"""Task schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

TaskPriority = Literal["low", "medium", "high", "urgent"]
TaskStatus = Literal["pending", "in_progress", "completed", "cancelled"]


class TaskCreate(BaseModel):
    title: str
    description: str | None = None
    due_date: datetime | None = None
    priority: TaskPriority = "medium"
    status: TaskStatus = "pending"
    type: str | None = None
    contact_id: uuid.UUID | None = None
    deal_id: uuid.UUID | None = None
    sort_order: int = 0


class TaskUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    due_date: datetime | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    type: str | None = None
    contact_id: uuid.UUID | None = None
    deal_id: uuid.UUID | None = None
    sort_order: int | None = None


class TaskResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    due_date: datetime | None = None
    priority: str
    status: str
    type: str | None = None
    contact_id: uuid.UUID | None = None
    deal_id: uuid.UUID | None = None
    assigned_user_id: uuid.UUID
    sort_order: int
    completed_at: datetime | None = None
    google_calendar_event_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskReorder(BaseModel):
    status: TaskStatus
    task_ids: list[uuid.UUID]


class TaskTypeCreate(BaseModel):
    name: str
