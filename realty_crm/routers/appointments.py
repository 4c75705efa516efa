"""Appointment and appointment type JSON API."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.deps import get_current_user
from ..database import get_db
from ..models.user import User
from ..schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentTypeCreate,
    AppointmentTypeResponse,
    AppointmentTypeUpdate,
    AppointmentUpdate,
)
from ..services import appointment_svc, appointment_type_svc

router = APIRouter(prefix="/api", tags=["appointments"])


@router.get("/appointments", response_model=list[AppointmentResponse])
async def list_appointments(
    start: datetime | None = None,
    end: datetime | None = None,
    status: str | None = None,
    q: str | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if start and end:
        return await appointment_svc.get_appointments_by_date_range(db, user.id, start, end)
    if status:
        return await appointment_svc.get_appointments_by_status(db, user.id, status)
    if q:
        return await appointment_svc.search_appointments(db, user.id, q)
    return await appointment_svc.get_appointments(db, user.id)


@router.get("/appointments/upcoming", response_model=list[AppointmentResponse])
async def upcoming_appointments(
    limit: int = 10,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await appointment_svc.get_upcoming_appointments(db, user.id, limit=limit)


@router.get("/appointments/today", response_model=list[AppointmentResponse])
async def todays_appointments(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await appointment_svc.get_todays_appointments(db, user.id)


@router.post("/appointments", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await appointment_svc.create_appointment(db, user.id, **data.model_dump())


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    appt = await appointment_svc.get_appointment(db, appointment_id, user_id=user.id)
    if not appt:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appt


@router.patch("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: uuid.UUID,
    data: AppointmentUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await appointment_svc.update_appointment(
        db, appointment_id, user_id=user.id, **data.model_dump(exclude_unset=True)
    )


@router.delete("/appointments/{appointment_id}")
async def delete_appointment(
    appointment_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await appointment_svc.delete_appointment(db, appointment_id, user_id=user.id):
        raise HTTPException(status_code=404, detail="Appointment not found")
    return {"ok": True}


@router.get("/appointment-types", response_model=list[AppointmentTypeResponse])
async def list_appointment_types(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await appointment_type_svc.get_appointment_types(db, user.id)


@router.post("/appointment-types", response_model=AppointmentTypeResponse, status_code=201)
async def create_appointment_type(
    data: AppointmentTypeCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await appointment_type_svc.create_appointment_type(db, data.name, user.id, data.color)


@router.patch("/appointment-types/{type_id}", response_model=AppointmentTypeResponse)
async def update_appointment_type(
    type_id: uuid.UUID,
    data: AppointmentTypeUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    appt_type = await appointment_type_svc.update_appointment_type(
        db, type_id, user.id, **data.model_dump(exclude_unset=True)
    )
    if not appt_type:
        raise HTTPException(status_code=404, detail="Appointment type not found")
    return appt_type


@router.delete("/appointment-types/{type_id}")
async def delete_appointment_type(
    type_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await appointment_type_svc.delete_appointment_type(db, type_id, user.id):
        raise HTTPException(status_code=404, detail="Appointment type not found")
    return {"ok": True}
