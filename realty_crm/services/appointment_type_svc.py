"""Appointment type catalogue - shared defaults plus per-user custom types."""

from __future__ import annotations

import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ValidationError
from ..models.appointment import DEFAULT_APPOINTMENT_TYPES, AppointmentType

DEFAULT_COLOR = "#3B82F6"


def _visible(user_id: uuid.UUID):
    return select(AppointmentType).where(
        or_(AppointmentType.is_default.is_(True), AppointmentType.user_id == user_id)
    )


async def get_appointment_types(db: AsyncSession, user_id: uuid.UUID) -> list[AppointmentType]:
    """Defaults first, then alphabetical."""
    stmt = _visible(user_id).order_by(AppointmentType.is_default.desc(), AppointmentType.name)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_appointment_type_by_name(
    db: AsyncSession, name: str, user_id: uuid.UUID
) -> AppointmentType | None:
    stmt = _visible(user_id).where(AppointmentType.name == name).order_by(
        AppointmentType.is_default.asc()
    )
    return (await db.execute(stmt)).scalars().first()


async def create_appointment_type(
    db: AsyncSession, name: str, user_id: uuid.UUID, color: str = DEFAULT_COLOR
) -> AppointmentType:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Appointment type name cannot be empty")
    existing = await get_appointment_type_by_name(db, cleaned, user_id)
    if existing:
        raise ValidationError("Appointment type already exists")
    appt_type = AppointmentType(
        name=cleaned, color=color or DEFAULT_COLOR, is_default=False, user_id=user_id
    )
    db.add(appt_type)
    await db.commit()
    await db.refresh(appt_type)
    return appt_type


async def _custom(db: AsyncSession, type_id: uuid.UUID, user_id: uuid.UUID) -> AppointmentType | None:
    stmt = select(AppointmentType).where(
        AppointmentType.id == type_id,
        AppointmentType.user_id == user_id,
        AppointmentType.is_default.is_(False),
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def update_appointment_type(
    db: AsyncSession, type_id: uuid.UUID, user_id: uuid.UUID, **kwargs
) -> AppointmentType | None:
    appt_type = await _custom(db, type_id, user_id)
    if not appt_type:
        return None
    if "name" in kwargs:
        kwargs["name"] = (kwargs["name"] or "").strip()
        if not kwargs["name"]:
            raise ValidationError("Appointment type name cannot be empty")
    for key in ("name", "color"):
        if key in kwargs and kwargs[key] is not None:
            setattr(appt_type, key, kwargs[key])
    await db.commit()
    await db.refresh(appt_type)
    return appt_type


async def delete_appointment_type(db: AsyncSession, type_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    """Only the user's own custom types can be deleted."""
    appt_type = await _custom(db, type_id, user_id)
    if not appt_type:
        return False
    await db.delete(appt_type)
    await db.commit()
    return True


async def ensure_default_appointment_types(db: AsyncSession) -> int:
    """Insert any missing shared defaults. Returns the number created."""
    stmt = select(func.lower(AppointmentType.name)).where(AppointmentType.is_default.is_(True))
    existing = set((await db.execute(stmt)).scalars().all())
    created = 0
    for name in DEFAULT_APPOINTMENT_TYPES:
        if name.lower() in existing:
            continue
        db.add(AppointmentType(name=name, color=DEFAULT_COLOR, is_default=True, user_id=None))
        created += 1
    if created:
        await db.commit()
    return created
