"""Deal and deal document schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from .contact import ContactSummary

DealStatus = Literal["prospect", "qualified", "proposal", "negotiation", "closed_won", "closed_lost"]
DealType = Literal["buying", "selling", "renting", "investment"]


class DealCreate(BaseModel):
    title: str
    description: str | None = None
    status: DealStatus = "prospect"
    deal_type: DealType = "buying"
    property_address: str | None = None
    price: float | None = None
    commission: float | None = None
    probability: int | None = Field(default=None, ge=0, le=100)
    expected_close_date: date | None = None
    contact_id: uuid.UUID | None = None


class DealUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    status: DealStatus | None = None
    deal_type: DealType | None = None
    property_address: str | None = None
    price: float | None = None
    commission: float | None = None
    probability: int | None = Field(default=None, ge=0, le=100)
    expected_close_date: date | None = None
    contact_id: uuid.UUID | None = None


class DealResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    status: str
    deal_type: str
    property_address: str | None = None
    price: float | None = None
    commission: float | None = None
    probability: int | None = None
    expected_close_date: date | None = None
    contact_id: uuid.UUID | None = None
    assigned_agent_id: uuid.UUID
    contact: ContactSummary | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DealDocumentUpdate(BaseModel):
    name: str | None = None


class DealDocumentResponse(BaseModel):
    id: uuid.UUID
    deal_id: uuid.UUID
    name: str
    file_name: str
    file_path: str
    file_size: int | None = None
    mime_type: str | None = None
    uploaded_by: uuid.UUID | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
