"""Deal service - pipeline CRUD and search."""

from __future__ import annotations

import uuid

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.base import utcnow
from ..models.contact import Contact
from ..models.deal import Deal
from .common import LIKE_ESCAPE, coerce_date, like_pattern


def _base_query(user_id: uuid.UUID):
    return (
        select(Deal)
        .where(Deal.assigned_agent_id == user_id)
        .options(selectinload(Deal.contact))
    )


async def get_deals(
    db: AsyncSession,
    user_id: uuid.UUID | None = None,
    *,
    limit: int = 50,
    offset: int = 0,
) -> list[Deal]:
    """List deals newest first with the contact summary loaded."""
    stmt = select(Deal).options(selectinload(Deal.contact))
    if user_id:
        stmt = stmt.where(Deal.assigned_agent_id == user_id)
    stmt = stmt.order_by(Deal.created_at.desc()).offset(offset).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_deal_by_id(db: AsyncSession, deal_id: uuid.UUID, user_id: uuid.UUID) -> Deal | None:
    stmt = (
        _base_query(user_id)
        .where(Deal.id == deal_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def create_deal(db: AsyncSession, user_id: uuid.UUID, **kwargs) -> Deal:
    if "expected_close_date" in kwargs:
        kwargs["expected_close_date"] = coerce_date(kwargs.get("expected_close_date"))
    deal = Deal(assigned_agent_id=user_id, **kwargs)
    db.add(deal)
    await db.commit()
    return await get_deal_by_id(db, deal.id, user_id)


async def update_deal(
    db: AsyncSession, deal_id: uuid.UUID, user_id: uuid.UUID, **kwargs
) -> Deal | None:
    deal = await get_deal_by_id(db, deal_id, user_id)
    if not deal:
        return None
    kwargs.pop("id", None)
    kwargs.pop("assigned_agent_id", None)
    if "expected_close_date" in kwargs:
        kwargs["expected_close_date"] = coerce_date(kwargs.get("expected_close_date"))
    for key, value in kwargs.items():
        setattr(deal, key, value)
    deal.updated_at = utcnow()
    await db.commit()
    return await get_deal_by_id(db, deal_id, user_id)


async def delete_deal(db: AsyncSession, deal_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    stmt = select(Deal).where(Deal.id == deal_id, Deal.assigned_agent_id == user_id)
    deal = (await db.execute(stmt)).scalar_one_or_none()
    if not deal:
        return False
    await db.delete(deal)
    await db.commit()
    return True


async def search_deals(
    db: AsyncSession,
    user_id: uuid.UUID,
    query: str,
    status: str | None = None,
) -> list[Deal]:
    """Match the deal title or the linked contact's name.

    ``status="all"`` (or None) disables the status filter.
    """
    stmt = _base_query(user_id).outerjoin(Contact, Deal.contact_id == Contact.id)
    term = (query or "").strip()
    if term:
        q = like_pattern(term)
        stmt = stmt.where(
            or_(
                Deal.title.ilike(q, escape=LIKE_ESCAPE),
                Contact.first_name.ilike(q, escape=LIKE_ESCAPE),
                Contact.last_name.ilike(q, escape=LIKE_ESCAPE),
            )
        )
    if status and status != "all":
        stmt = stmt.where(Deal.status == status)
    stmt = stmt.order_by(Deal.created_at.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_deals_by_status(db: AsyncSession, user_id: uuid.UUID, status: str) -> list[Deal]:
    stmt = _base_query(user_id).where(Deal.status == status).order_by(Deal.created_at.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())
