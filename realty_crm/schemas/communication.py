"""Communication and activity schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class CommunicationCreate(BaseModel):
    contact_id: uuid.UUID
    type: Literal["email", "sms", "call"]
    direction: Literal["inbound", "outbound"]
    subject: str | None = None
    content: str
    metadata: dict | None = None


class CommunicationUpdate(BaseModel):
    subject: str | None = None
    content: str | None = None
    metadata: dict | None = None


class AuthorSummary(BaseModel):
    id: uuid.UUID
    email: str
    full_name: str | None = None

    model_config = {"from_attributes": True}


class CommunicationResponse(BaseModel):
    id: uuid.UUID
    contact_id: uuid.UUID
    user_id: uuid.UUID
    type: str
    direction: str
    subject: str | None = None
    content: str
    metadata: dict | None = Field(default=None, validation_alias="metadata_json")
    created_at: datetime

    model_config = {"from_attributes": True}


ActivityType = Literal["call", "email", "sms", "meeting", "note"]
ActivityDirection = Literal["inbound", "outbound", "none"]


class ActivityCreate(BaseModel):
    contact_id: uuid.UUID | None = None
    type: ActivityType
    direction: ActivityDirection = "none"
    title: str
    notes: str | None = None
    occurred_at: datetime | None = None


class ActivityUpdate(BaseModel):
    type: ActivityType | None = None
    direction: ActivityDirection | None = None
    title: str | None = None
    notes: str | None = None
    occurred_at: datetime | None = None


class ActivityResponse(BaseModel):
    id: uuid.UUID
    contact_id: uuid.UUID | None = None
    user_id: uuid.UUID
    type: str
    direction: str
    title: str
    notes: str | None = None
    occurred_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}
