"""Communication log and activity timeline JSON API."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.deps import get_current_user
from ..database import get_db
from ..models.user import User
from ..schemas.communication import (
    ActivityCreate,
    ActivityResponse,
    ActivityUpdate,
    CommunicationCreate,
    CommunicationResponse,
    CommunicationUpdate,
)
from ..services import activity_svc, communication_svc, contact_svc

router = APIRouter(prefix="/api", tags=["communications"])


async def _own_communication(db: AsyncSession, communication_id: uuid.UUID, user: User):
    comm = await communication_svc.get_communication(db, communication_id)
    if not comm or comm.user_id != user.id:
        raise HTTPException(status_code=404, detail="Communication not found")
    return comm


@router.get("/communications", response_model=list[CommunicationResponse])
async def list_communications(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await communication_svc.get_communications_by_user(db, user.id)


@router.post("/communications", response_model=CommunicationResponse, status_code=201)
async def create_communication(
    data: CommunicationCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await contact_svc.get_contact_by_id(db, data.contact_id, user.id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return await communication_svc.create_communication(
        db,
        user.id,
        data.contact_id,
        type=data.type,
        direction=data.direction,
        content=data.content,
        subject=data.subject,
        metadata=data.metadata,
    )


@router.patch("/communications/{communication_id}", response_model=CommunicationResponse)
async def update_communication(
    communication_id: uuid.UUID,
    data: CommunicationUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _own_communication(db, communication_id, user)
    return await communication_svc.update_communication(
        db, communication_id, **data.model_dump(exclude_unset=True)
    )


@router.delete("/communications/{communication_id}")
async def delete_communication(
    communication_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _own_communication(db, communication_id, user)
    await communication_svc.delete_communication(db, communication_id)
    return {"ok": True}


@router.get("/activities", response_model=list[ActivityResponse])
async def list_activities(
    limit: int = 50,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await activity_svc.get_by_user(db, user.id, limit=limit)


@router.post("/activities", response_model=ActivityResponse, status_code=201)
async def create_activity(
    data: ActivityCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if data.contact_id and not await contact_svc.get_contact_by_id(db, data.contact_id, user.id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return await activity_svc.create(db, user.id, **data.model_dump())


@router.patch("/activities/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    activity_id: uuid.UUID,
    data: ActivityUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    activity = await activity_svc.update(
        db, activity_id, user_id=user.id, **data.model_dump(exclude_unset=True)
    )
    if not activity:
        raise HTTPException(status_code=404, detail="Activity not found")
    return activity


@router.delete("/activities/{activity_id}")
async def delete_activity(
    activity_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await activity_svc.remove(db, activity_id, user_id=user.id):
        raise HTTPException(status_code=404, detail="Activity not found")
    return {"ok": True}
