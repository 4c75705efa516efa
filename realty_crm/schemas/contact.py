"""Contact schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

ContactType = Literal["buyer", "seller", "investor", "past_client", "lead"]
ContactStatus = Literal["new", "qualified", "nurturing", "lost", "converted"]


class ContactBase(BaseModel):
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    property_preferences: dict | None = None
    budget_min: float | None = None
    budget_max: float | None = None
    timeline: str | None = None
    lead_source: str | None = None
    notes: str | None = None


class ContactCreate(ContactBase):
    first_name: str
    last_name: str
    contact_type: ContactType = "lead"
    status: ContactStatus = "new"
    lead_score: int = 0


class ContactUpdate(ContactBase):
    first_name: str | None = None
    last_name: str | None = None
    contact_type: ContactType | None = None
    status: ContactStatus | None = None
    lead_score: int | None = None


class ContactResponse(ContactBase):
    id: uuid.UUID
    first_name: str
    last_name: str
    contact_type: str
    status: str
    lead_score: int
    assigned_agent_id: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ContactSummary(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None

    model_config = {"from_attributes": True}


class ContactWithCounts(ContactResponse):
    communication_count: int = 0
    deal_count: int = 0
    task_count: int = 0


class DealBrief(BaseModel):
    id: uuid.UUID
    title: str
    status: str
    price: float | None = None

    model_config = {"from_attributes": True}


class TaskBrief(BaseModel):
    id: uuid.UUID
    title: str
    status: str
    priority: str
    due_date: datetime | None = None

    model_config = {"from_attributes": True}


class CommunicationBrief(BaseModel):
    id: uuid.UUID
    type: str
    direction: str
    subject: str | None = None
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ContactDetail(ContactResponse):
    communications: list[CommunicationBrief] = []
    deals: list[DealBrief] = []
    tasks: list[TaskBrief] = []
