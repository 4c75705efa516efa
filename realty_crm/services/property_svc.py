"""Property listing service - filtered lists, CRUD and portfolio stats."""

from __future__ import annotations

import uuid
from collections import Counter

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.base import utcnow
from ..models.property import LISTING_TYPES, PROPERTY_STATUSES, Property
from ..schemas.property import PropertyFilters
from ..storage.filestore import FileStore
from .common import LIKE_ESCAPE, like_pattern

SEARCH_LIMIT = 20


def _owned(user_id: uuid.UUID):
    return (
        select(Property)
        .where(Property.user_id == user_id)
        .options(selectinload(Property.images))
    )


def _search_clause(term: str):
    q = like_pattern(term)
    return or_(
        Property.title.ilike(q, escape=LIKE_ESCAPE),
        Property.address.ilike(q, escape=LIKE_ESCAPE),
        Property.city.ilike(q, escape=LIKE_ESCAPE),
        Property.description.ilike(q, escape=LIKE_ESCAPE),
        Property.mls_number.ilike(q, escape=LIKE_ESCAPE),
    )


def apply_filters(stmt, filters: PropertyFilters | None):
    """Apply a ``PropertyFilters`` object to a property select."""
    if filters is None:
        return stmt
    if filters.listing_type and filters.listing_type != "all":
        stmt = stmt.where(Property.listing_type == filters.listing_type)
    if filters.status:
        stmt = stmt.where(Property.status == filters.status)
    if filters.property_type:
        stmt = stmt.where(Property.property_type == filters.property_type)

    ranges = (
        (Property.list_price, filters.min_price, filters.max_price),
        (Property.bedrooms, filters.min_bedrooms, filters.max_bedrooms),
        (Property.bathrooms, filters.min_bathrooms, filters.max_bathrooms),
        (Property.square_feet, filters.min_square_feet, filters.max_square_feet),
    )
    for column, low, high in ranges:
        if low is not None:
            stmt = stmt.where(column >= low)
        if high is not None:
            stmt = stmt.where(column <= high)

    if filters.city:
        stmt = stmt.where(Property.city.ilike(like_pattern(filters.city), escape=LIKE_ESCAPE))
    if filters.state:
        stmt = stmt.where(Property.state == filters.state)
    if filters.contact_id:
        stmt = stmt.where(Property.contact_id == filters.contact_id)
    if filters.deal_id:
        stmt = stmt.where(Property.deal_id == filters.deal_id)
    if filters.search and filters.search.strip():
        stmt = stmt.where(_search_clause(filters.search.strip()))
    return stmt


async def get_properties(
    db: AsyncSession, user_id: uuid.UUID, filters: PropertyFilters | None = None
) -> list[Property]:
    """List the user's properties, newest first. Images are loaded so
    ``Property.primary_image`` resolves without extra queries."""
    stmt = apply_filters(_owned(user_id), filters).order_by(Property.created_at.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_property(db: AsyncSession, property_id: uuid.UUID, user_id: uuid.UUID) -> Property | None:
    stmt = (
        _owned(user_id)
        .where(Property.id == property_id)
        .execution_options(populate_existing=True)
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def create_property(db: AsyncSession, user_id: uuid.UUID, **kwargs) -> Property:
    kwargs.pop("id", None)
    prop = Property(user_id=user_id, **kwargs)
    db.add(prop)
    await db.commit()
    return await get_property(db, prop.id, user_id)


async def update_property(
    db: AsyncSession, property_id: uuid.UUID, user_id: uuid.UUID, **kwargs
) -> Property | None:
    prop = await get_property(db, property_id, user_id)
    if not prop:
        return None
    kwargs.pop("id", None)
    kwargs.pop("user_id", None)
    for key, value in kwargs.items():
        setattr(prop, key, value)
    prop.updated_at = utcnow()
    await db.commit()
    return await get_property(db, property_id, user_id)


async def delete_property(
    db: AsyncSession,
    property_id: uuid.UUID,
    user_id: uuid.UUID,
    store: FileStore | None = None,
) -> bool:
    """Delete a property and its image rows; stored image files go too when
    a store is given."""
    prop = await get_property(db, property_id, user_id)
    if not prop:
        return False
    keys = [img.storage_key for img in prop.images if img.storage_key]
    await db.delete(prop)
    await db.commit()
    if store is not None:
        for key in keys:
            store.delete(key)
    return True


async def search_properties(db: AsyncSession, user_id: uuid.UUID, query: str) -> list[Property]:
    stmt = _owned(user_id)
    term = (query or "").strip()
    if term:
        stmt = stmt.where(_search_clause(term))
    stmt = stmt.order_by(Property.created_at.desc()).limit(SEARCH_LIMIT)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_properties_by_contact(
    db: AsyncSession, user_id: uuid.UUID, contact_id: uuid.UUID
) -> list[Property]:
    return await get_properties(db, user_id, PropertyFilters(contact_id=contact_id))


async def get_properties_by_deal(
    db: AsyncSession, user_id: uuid.UUID, deal_id: uuid.UUID
) -> list[Property]:
    return await get_properties(db, user_id, PropertyFilters(deal_id=deal_id))


async def get_property_stats(db: AsyncSession, user_id: uuid.UUID) -> dict:
    """Portfolio summary for the properties page."""
    stmt = select(
        Property.listing_type,
        Property.status,
        Property.property_type,
        Property.city,
        Property.list_price,
    ).where(Property.user_id == user_id)
    rows = (await db.execute(stmt)).all()

    by_listing = Counter(r.listing_type for r in rows)
    by_status = Counter(r.status for r in rows)
    prices = [r.list_price for r in rows if r.list_price]
    total_value = float(sum(prices))

    return {
        "total": len(rows),
        **{listing: by_listing.get(listing, 0) for listing in LISTING_TYPES},
        **{status: by_status.get(status, 0) for status in PROPERTY_STATUSES},
        "total_value": total_value,
        "average_price": total_value / len(prices) if prices else 0.0,
        "by_type": dict(Counter(r.property_type for r in rows if r.property_type)),
        "by_city": dict(Counter(r.city for r in rows if r.city)),
    }
