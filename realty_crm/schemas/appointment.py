"""Appointment schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel

AppointmentStatus = Literal["scheduled", "confirmed", "in_progress", "completed", "cancelled", "no_show"]


class AppointmentCreate(BaseModel):
    title: str
    description: str | None = None
    start_datetime: datetime
    end_datetime: datetime | None = None
    location: str | None = None
    appointment_type: str | None = None
    status: AppointmentStatus = "scheduled"
    priority: str | None = None
    contact_id: uuid.UUID | None = None
    deal_id: uuid.UUID | None = None
    notes: str | None = None
    reminder_minutes: int | None = None
    is_recurring: bool = False
    recurring_pattern: str | None = None
    recurring_end_date: date | None = None


class AppointmentUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    start_datetime: datetime | None = None
    end_datetime: datetime | None = None
    location: str | None = None
    appointment_type: str | None = None
    status: AppointmentStatus | None = None
    priority: str | None = None
    contact_id: uuid.UUID | None = None
    deal_id: uuid.UUID | None = None
    notes: str | None = None
    reminder_minutes: int | None = None
    is_recurring: bool | None = None
    recurring_pattern: str | None = None
    recurring_end_date: date | None = None


class AppointmentResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    start_datetime: datetime
    end_datetime: datetime | None = None
    location: str | None = None
    appointment_type: str | None = None
    status: str
    priority: str | None = None
    contact_id: uuid.UUID | None = None
    deal_id: uuid.UUID | None = None
    assigned_user_id: uuid.UUID
    notes: str | None = None
    reminder_minutes: int | None = None
    is_recurring: bool
    recurring_pattern: str | None = None
    recurring_end_date: date | None = None
    google_calendar_event_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AppointmentTypeCreate(BaseModel):
    name: str
    color: str = "#3B82F6"


class AppointmentTypeUpdate(BaseModel):
    name: str | None = None
    color: str | None = None


class AppointmentTypeResponse(BaseModel):
    id: uuid.UUID
    name: str
    color: str
    is_default: bool
    user_id: uuid.UUID | None = None

    model_config = {"from_attributes": True}
