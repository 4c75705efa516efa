"""Appointment service - calendar entries owned by one agent."""

from __future__ import annotations

import uuid
from datetime import datetime, time, timedelta

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFoundError, ValidationError
from ..models.appointment import Appointment
from ..models.base import utcnow
from .common import LIKE_ESCAPE, coerce_date, coerce_datetime, like_pattern

UPCOMING_STATUSES = ("scheduled", "confirmed")


def _owned(user_id: uuid.UUID):
    return select(Appointment).where(Appointment.assigned_user_id == user_id)


async def _all(db: AsyncSession, stmt) -> list[Appointment]:
    result = await db.execute(stmt.order_by(Appointment.start_datetime.asc()))
    return list(result.scalars().all())


def _normalize(kwargs: dict) -> dict:
    for key in ("start_datetime", "end_datetime"):
        if key in kwargs and kwargs[key] is not None:
            kwargs[key] = coerce_datetime(kwargs[key])
    if "recurring_end_date" in kwargs:
        kwargs["recurring_end_date"] = coerce_date(kwargs["recurring_end_date"])
    return kwargs


async def get_appointments(db: AsyncSession, user_id: uuid.UUID) -> list[Appointment]:
    return await _all(db, _owned(user_id))


async def get_appointments_by_date_range(
    db: AsyncSession, user_id: uuid.UUID, start: datetime, end: datetime
) -> list[Appointment]:
    """Appointments whose start falls inside ``[start, end]``."""
    stmt = _owned(user_id).where(
        Appointment.start_datetime >= coerce_datetime(start),
        Appointment.start_datetime <= coerce_datetime(end),
    )
    return await _all(db, stmt)


async def get_appointments_by_status(
    db: AsyncSession, user_id: uuid.UUID, status: str
) -> list[Appointment]:
    return await _all(db, _owned(user_id).where(Appointment.status == status))


async def search_appointments(db: AsyncSession, user_id: uuid.UUID, query: str) -> list[Appointment]:
    stmt = _owned(user_id)
    term = (query or "").strip()
    if term:
        q = like_pattern(term)
        stmt = stmt.where(
            or_(
                Appointment.title.ilike(q, escape=LIKE_ESCAPE),
                Appointment.description.ilike(q, escape=LIKE_ESCAPE),
                Appointment.location.ilike(q, escape=LIKE_ESCAPE),
            )
        )
    return await _all(db, stmt)


async def get_appointment(
    db: AsyncSession, appointment_id: uuid.UUID, *, user_id: uuid.UUID | None = None
) -> Appointment | None:
    stmt = select(Appointment).where(Appointment.id == appointment_id)
    if user_id:
        stmt = stmt.where(Appointment.assigned_user_id == user_id)
    return (await db.execute(stmt)).scalar_one_or_none()


async def create_appointment(db: AsyncSession, user_id: uuid.UUID, **kwargs) -> Appointment:
    kwargs.pop("id", None)
    if not kwargs.get("start_datetime"):
        raise ValidationError("Appointment start time is required")
    appt = Appointment(assigned_user_id=user_id, **_normalize(kwargs))
    db.add(appt)
    await db.commit()
    await db.refresh(appt)
    return appt


async def update_appointment(
    db: AsyncSession,
    appointment_id: uuid.UUID | None,
    *,
    user_id: uuid.UUID | None = None,
    **kwargs,
) -> Appointment:
    if not appointment_id:
        raise ValidationError("Appointment ID is required for update")
    kwargs.pop("id", None)
    if not kwargs:
        raise ValidationError("No fields to update")
    appt = await get_appointment(db, appointment_id, user_id=user_id)
    if not appt:
        raise NotFoundError(f"Appointment {appointment_id} not found")
    for key, value in _normalize(kwargs).items():
        setattr(appt, key, value)
    appt.updated_at = utcnow()
    await db.commit()
    await db.refresh(appt)
    return appt


async def delete_appointment(
    db: AsyncSession, appointment_id: uuid.UUID, *, user_id: uuid.UUID | None = None
) -> bool:
    appt = await get_appointment(db, appointment_id, user_id=user_id)
    if not appt:
        return False
    await db.delete(appt)
    await db.commit()
    return True


async def get_upcoming_appointments(
    db: AsyncSession, user_id: uuid.UUID, limit: int = 10
) -> list[Appointment]:
    stmt = (
        _owned(user_id)
        .where(
            Appointment.start_datetime >= utcnow(),
            Appointment.status.in_(UPCOMING_STATUSES),
        )
        .order_by(Appointment.start_datetime.asc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_todays_appointments(
    db: AsyncSession, user_id: uuid.UUID, *, now: datetime | None = None
) -> list[Appointment]:
    now = coerce_datetime(now) if now else utcnow()
    start = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return await get_appointments_by_date_range(db, user_id, start, end)
