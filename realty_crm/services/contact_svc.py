"""Contact service - CRUD, search and status views scoped to the owning agent."""

from __future__ import annotations

import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.base import utcnow
from ..models.communication import Communication
from ..models.contact import Contact
from ..models.deal import Deal
from ..models.task import Task
from .common import LIKE_ESCAPE, like_pattern


async def get_contacts(
    db: AsyncSession,
    user_id: uuid.UUID | None = None,
    *,
    limit: int = 50,
    offset: int = 0,
) -> list[Contact]:
    """List contacts, most recently updated first."""
    stmt = select(Contact)
    if user_id:
        stmt = stmt.where(Contact.assigned_agent_id == user_id)
    stmt = stmt.order_by(Contact.updated_at.desc()).offset(offset).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_contact_by_id(
    db: AsyncSession, contact_id: uuid.UUID, user_id: uuid.UUID
) -> Contact | None:
    """Get a single contact with communications, deals and tasks loaded."""
    stmt = (
        select(Contact)
        .where(Contact.id == contact_id, Contact.assigned_agent_id == user_id)
        .options(
            selectinload(Contact.communications),
            selectinload(Contact.deals),
            selectinload(Contact.tasks),
        )
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def create_contact(db: AsyncSession, user_id: uuid.UUID, **kwargs) -> Contact:
    """Create a contact owned by ``user_id``."""
    contact = Contact(assigned_agent_id=user_id, **kwargs)
    db.add(contact)
    await db.commit()
    return await get_contact_by_id(db, contact.id, user_id)


async def update_contact(
    db: AsyncSession, contact_id: uuid.UUID, user_id: uuid.UUID, **kwargs
) -> Contact | None:
    contact = await get_contact_by_id(db, contact_id, user_id)
    if not contact:
        return None
    kwargs.pop("id", None)
    kwargs.pop("assigned_agent_id", None)
    for key, value in kwargs.items():
        setattr(contact, key, value)
    contact.updated_at = utcnow()
    await db.commit()
    return await get_contact_by_id(db, contact_id, user_id)


async def delete_contact(db: AsyncSession, contact_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    """Delete a contact. Returns True if found and deleted."""
    contact = await get_contact_by_id(db, contact_id, user_id)
    if not contact:
        return False
    await db.delete(contact)
    await db.commit()
    return True


def _counted(stmt):
    """Annotate a contact query with communication/deal/task counts."""
    comm_count = (
        select(func.count(Communication.id))
        .where(Communication.contact_id == Contact.id)
        .correlate(Contact)
        .scalar_subquery()
    )
    deal_count = (
        select(func.count(Deal.id)).where(Deal.contact_id == Contact.id).correlate(Contact).scalar_subquery()
    )
    task_count = (
        select(func.count(Task.id)).where(Task.contact_id == Contact.id).correlate(Contact).scalar_subquery()
    )
    return stmt.add_columns(
        comm_count.label("communication_count"),
        deal_count.label("deal_count"),
        task_count.label("task_count"),
    )


async def _with_counts(db: AsyncSession, stmt) -> list[dict]:
    result = await db.execute(_counted(stmt))
    rows = []
    for contact, comm_count, deal_count, task_count in result.all():
        rows.append({
            "contact": contact,
            "communication_count": comm_count or 0,
            "deal_count": deal_count or 0,
            "task_count": task_count or 0,
        })
    return rows


async def search_contacts(db: AsyncSession, query: str, user_id: uuid.UUID) -> list[dict]:
    """Case-insensitive substring search over name, email and phone."""
    stmt = select(Contact).where(Contact.assigned_agent_id == user_id)
    term = (query or "").strip()
    if term:
        q = like_pattern(term)
        stmt = stmt.where(
            or_(
                Contact.first_name.ilike(q, escape=LIKE_ESCAPE),
                Contact.last_name.ilike(q, escape=LIKE_ESCAPE),
                Contact.email.ilike(q, escape=LIKE_ESCAPE),
                Contact.phone.ilike(q, escape=LIKE_ESCAPE),
            )
        )
    stmt = stmt.order_by(Contact.updated_at.desc())
    return await _with_counts(db, stmt)


async def get_contacts_by_status(db: AsyncSession, status: str, user_id: uuid.UUID) -> list[dict]:
    stmt = (
        select(Contact)
        .where(Contact.assigned_agent_id == user_id, Contact.status == status)
        .order_by(Contact.updated_at.desc())
    )
    return await _with_counts(db, stmt)
