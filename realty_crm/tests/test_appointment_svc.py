"""Test appointment and appointment type services."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.errors import NotFoundError, ValidationError
from realty_crm.models.appointment import DEFAULT_APPOINTMENT_TYPES
from realty_crm.models.user import User
from realty_crm.services import appointment_svc, appointment_type_svc

NOON = datetime(2026, 4, 15, 12, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_date_range_is_inclusive(db: AsyncSession, user: User):
    await appointment_svc.create_appointment(db, user.id, title="Edge", start_datetime=NOON)
    await appointment_svc.create_appointment(
        db, user.id, title="Outside", start_datetime=NOON + timedelta(days=3)
    )

    found = await appointment_svc.get_appointments_by_date_range(db, user.id, NOON, NOON + timedelta(days=1))
    assert [a.title for a in found] == ["Edge"]


@pytest.mark.asyncio
async def test_todays_appointments(db: AsyncSession, user: User):
    await appointment_svc.create_appointment(db, user.id, title="Morning", start_datetime="2026-04-15T08:00:00Z")
    await appointment_svc.create_appointment(db, user.id, title="Tomorrow", start_datetime="2026-04-16T08:00:00Z")

    today = await appointment_svc.get_todays_appointments(db, user.id, now=NOON)
    assert [a.title for a in today] == ["Morning"]


@pytest.mark.asyncio
async def test_search_and_status(db: AsyncSession, user: User):
    await appointment_svc.create_appointment(
        db, user.id, title="Showing", location="44 Pine Ave", start_datetime=NOON, status="confirmed"
    )
    await appointment_svc.create_appointment(db, user.id, title="Closing", start_datetime=NOON)

    assert [a.title for a in await appointment_svc.search_appointments(db, user.id, "pine")] == ["Showing"]
    confirmed = await appointment_svc.get_appointments_by_status(db, user.id, "confirmed")
    assert [a.title for a in confirmed] == ["Showing"]


@pytest.mark.asyncio
async def test_update_requires_existing_appointment(db: AsyncSession, user: User):
    appt = await appointment_svc.create_appointment(db, user.id, title="Consult", start_datetime=NOON)

    updated = await appointment_svc.update_appointment(db, appt.id, user_id=user.id, status="completed")
    assert updated.id == appt.id
    assert updated.status == "completed"

    with pytest.raises(NotFoundError):
        await appointment_svc.update_appointment(db, uuid.uuid4(), user_id=user.id, status="completed")
    with pytest.raises(ValidationError):
        await appointment_svc.update_appointment(db, None, user_id=user.id, status="completed")
    with pytest.raises(ValidationError):
        await appointment_svc.update_appointment(db, appt.id, user_id=user.id)


@pytest.mark.asyncio
async def test_create_requires_start(db: AsyncSession, user: User):
    with pytest.raises(ValidationError):
        await appointment_svc.create_appointment(db, user.id, title="No time")


@pytest.mark.asyncio
async def test_appointment_types_defaults_then_custom(db: AsyncSession, user: User, other_user: User):
    await appointment_type_svc.ensure_default_appointment_types(db)
    custom = await appointment_type_svc.create_appointment_type(db, "Zoning Hearing", user.id, color="#10B981")

    names = [t.name for t in await appointment_type_svc.get_appointment_types(db, user.id)]
    assert len(names) == len(DEFAULT_APPOINTMENT_TYPES) + 1
    assert names[-1] == "Zoning Hearing"
    assert "Zoning Hearing" not in [t.name for t in await appointment_type_svc.get_appointment_types(db, other_user.id)]

    with pytest.raises(ValidationError, match="already exists"):
        await appointment_type_svc.create_appointment_type(db, "Open House", user.id)

    assert await appointment_type_svc.delete_appointment_type(db, custom.id, other_user.id) is False
    assert await appointment_type_svc.delete_appointment_type(db, custom.id, user.id) is True


@pytest.mark.asyncio
async def test_default_types_cannot_be_edited(db: AsyncSession, user: User):
    await appointment_type_svc.ensure_default_appointment_types(db)
    showing = await appointment_type_svc.get_appointment_type_by_name(db, "Property Showing", user.id)
    assert showing.is_default
    assert await appointment_type_svc.update_appointment_type(db, showing.id, user.id, color="#000") is None
    assert await appointment_type_svc.ensure_default_appointment_types(db) == 0
