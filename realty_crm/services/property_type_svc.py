"""Property type catalogue."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.property import PropertyType

DEFAULT_PROPERTY_TYPES = (
    ("Single Family Home", "residential"),
    ("Condominium", "residential"),
    ("Townhouse", "residential"),
    ("Multi-Family", "residential"),
    ("Mobile Home", "residential"),
    ("Office", "commercial"),
    ("Retail", "commercial"),
    ("Industrial", "commercial"),
    ("Mixed Use", "commercial"),
    ("Vacant Land", "land"),
    ("Farm/Ranch", "land"),
)


async def get_property_types(db: AsyncSession) -> list[PropertyType]:
    stmt = select(PropertyType).order_by(PropertyType.sort_order, PropertyType.name)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_property_types_by_category(db: AsyncSession, category: str) -> list[PropertyType]:
    stmt = (
        select(PropertyType)
        .where(PropertyType.category == category)
        .order_by(PropertyType.sort_order, PropertyType.name)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def ensure_default_property_types(db: AsyncSession) -> int:
    """Insert any missing default types. Returns the number created."""
    existing = set((await db.execute(select(PropertyType.name))).scalars().all())
    created = 0
    for position, (name, category) in enumerate(DEFAULT_PROPERTY_TYPES):
        if name in existing:
            continue
        db.add(PropertyType(name=name, category=category, is_default=True, sort_order=position))
        created += 1
    if created:
        await db.commit()
    return created
