"""Contact JSON API."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.deps import get_current_user
from ..database import get_db
from ..models.user import User
from ..schemas.communication import ActivityResponse, CommunicationResponse
from ..schemas.contact import (
    ContactCreate,
    ContactDetail,
    ContactResponse,
    ContactUpdate,
    ContactWithCounts,
)
from ..schemas.task import TaskResponse
from ..services import activity_svc, communication_svc, contact_svc, task_svc

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


def _with_counts(rows: list[dict]) -> list[ContactWithCounts]:
    return [
        ContactWithCounts(
            **ContactResponse.model_validate(row["contact"]).model_dump(),
            communication_count=row["communication_count"],
            deal_count=row["deal_count"],
            task_count=row["task_count"],
        )
        for row in rows
    ]


async def _owned_contact(db: AsyncSession, contact_id: uuid.UUID, user: User):
    contact = await contact_svc.get_contact_by_id(db, contact_id, user.id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@router.get("", response_model=list[ContactResponse])
async def list_contacts(
    limit: int = 50,
    offset: int = 0,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await contact_svc.get_contacts(db, user.id, limit=limit, offset=offset)


@router.get("/search", response_model=list[ContactWithCounts])
async def search_contacts(
    q: str = "",
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return _with_counts(await contact_svc.search_contacts(db, q, user.id))


@router.get("/status/{status}", response_model=list[ContactWithCounts])
async def contacts_by_status(
    status: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return _with_counts(await contact_svc.get_contacts_by_status(db, status, user.id))


@router.post("", response_model=ContactResponse, status_code=201)
async def create_contact(
    data: ContactCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await contact_svc.create_contact(db, user.id, **data.model_dump())


@router.get("/{contact_id}", response_model=ContactDetail)
async def get_contact(
    contact_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _owned_contact(db, contact_id, user)


@router.patch("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: uuid.UUID,
    data: ContactUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    contact = await contact_svc.update_contact(
        db, contact_id, user.id, **data.model_dump(exclude_unset=True)
    )
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await contact_svc.delete_contact(db, contact_id, user.id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return {"ok": True}


@router.get("/{contact_id}/tasks", response_model=list[TaskResponse])
async def contact_tasks(
    contact_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _owned_contact(db, contact_id, user)
    return await task_svc.get_tasks_by_contact(db, contact_id)


@router.get("/{contact_id}/communications", response_model=list[CommunicationResponse])
async def contact_communications(
    contact_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _owned_contact(db, contact_id, user)
    return await communication_svc.get_communications_by_contact(db, contact_id)


@router.get("/{contact_id}/activities", response_model=list[ActivityResponse])
async def contact_activities(
    contact_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _owned_contact(db, contact_id, user)
    return await activity_svc.get_by_contact(db, contact_id)
