"""Communication log service - emails, texts and calls per contact."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.communication import Communication


async def get_communications_by_contact(
    db: AsyncSession, contact_id: uuid.UUID
) -> list[Communication]:
    stmt = (
        select(Communication)
        .where(Communication.contact_id == contact_id)
        .options(selectinload(Communication.user))
        .order_by(Communication.created_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_communications_by_user(
    db: AsyncSession, user_id: uuid.UUID, *, limit: int = 100
) -> list[Communication]:
    stmt = (
        select(Communication)
        .where(Communication.user_id == user_id)
        .options(selectinload(Communication.contact))
        .order_by(Communication.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_communication(db: AsyncSession, communication_id: uuid.UUID) -> Communication | None:
    stmt = select(Communication).where(Communication.id == communication_id)
    return (await db.execute(stmt)).scalar_one_or_none()


async def create_communication(
    db: AsyncSession,
    user_id: uuid.UUID,
    contact_id: uuid.UUID,
    *,
    type: str,
    direction: str,
    content: str,
    subject: str | None = None,
    metadata: dict | None = None,
) -> Communication:
    comm = Communication(
        user_id=user_id,
        contact_id=contact_id,
        type=type,
        direction=direction,
        subject=subject,
        content=content,
        metadata_json=metadata,
    )
    db.add(comm)
    await db.commit()
    await db.refresh(comm)
    return comm


async def update_communication(
    db: AsyncSession, communication_id: uuid.UUID, **kwargs
) -> Communication | None:
    comm = await get_communication(db, communication_id)
    if not comm:
        return None
    if "metadata" in kwargs:
        kwargs["metadata_json"] = kwargs.pop("metadata")
    for key, value in kwargs.items():
        setattr(comm, key, value)
    await db.commit()
    await db.refresh(comm)
    return comm


async def delete_communication(db: AsyncSession, communication_id: uuid.UUID) -> bool:
    comm = await get_communication(db, communication_id)
    if not comm:
        return False
    await db.delete(comm)
    await db.commit()
    return True
