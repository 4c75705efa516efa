"""Test property listing and image services."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.errors import NotFoundError
from realty_crm.models.user import User
from realty_crm.schemas.property import PropertyFilters
from realty_crm.services import property_image_svc, property_svc, property_type_svc


async def _listing(db, user, **overrides):
    data = {
        "title": "Craftsman bungalow",
        "address": "12 Oak St",
        "city": "Austin",
        "state": "TX",
        "property_type": "Single Family",
        "list_price": 450000,
        "bedrooms": 3,
        "bathrooms": 2,
    }
    data.update(overrides)
    return await property_svc.create_property(db, user.id, **data)


@pytest.mark.asyncio
async def test_filters_combine(db: AsyncSession, user: User):
    await _listing(db, user)
    await _listing(db, user, title="Downtown condo", city="Dallas", list_price=300000, bedrooms=1)
    await _listing(db, user, title="Buyer wishlist", listing_type="client_interest", list_price=600000)

    mine = await property_svc.get_properties(db, user.id, PropertyFilters(listing_type="my_listing"))
    assert {p.title for p in mine} == {"Craftsman bungalow", "Downtown condo"}

    everything = await property_svc.get_properties(db, user.id, PropertyFilters(listing_type="all"))
    assert len(everything) == 3

    priced = await property_svc.get_properties(
        db, user.id, PropertyFilters(min_price=350000, max_price=500000, min_bedrooms=2)
    )
    assert [p.title for p in priced] == ["Craftsman bungalow"]

    in_city = await property_svc.get_properties(db, user.id, PropertyFilters(city="dal"))
    assert [p.title for p in in_city] == ["Downtown condo"]


@pytest.mark.asyncio
async def test_search_matches_address_and_mls(db: AsyncSession, user: User):
    await _listing(db, user, mls_number="MLS-777")
    await _listing(db, user, title="Ranch", address="9 Elm Rd")

    assert [p.title for p in await property_svc.search_properties(db, user.id, "mls-777")] == [
        "Craftsman bungalow"
    ]
    assert [p.title for p in await property_svc.search_properties(db, user.id, "elm")] == ["Ranch"]


@pytest.mark.asyncio
async def test_stats(db: AsyncSession, user: User):
    await _listing(db, user)
    await _listing(db, user, city="Dallas", list_price=250000, status="sold")
    await _listing(db, user, listing_type="client_interest", list_price=None)

    stats = await property_svc.get_property_stats(db, user.id)
    assert stats["total"] == 3
    assert stats["my_listing"] == 2
    assert stats["client_interest"] == 1
    assert stats["active"] == 2
    assert stats["sold"] == 1
    assert stats["total_value"] == 700000
    assert stats["average_price"] == 350000
    assert stats["by_city"] == {"Austin": 2, "Dallas": 1}
    assert stats["by_type"] == {"Single Family": 3}


@pytest.mark.asyncio
async def test_primary_image_rules(db: AsyncSession, user: User, store):
    prop = await _listing(db, user)
    assert prop.primary_image is None

    first, second = await property_image_svc.bulk_upload_images(
        db, store, prop.id, user.id, [("front.jpg", b"a"), ("kitchen.jpg", b"bb")]
    )
    assert first.is_primary and not second.is_primary
    assert store.exists(first.storage_key)

    await property_image_svc.set_primary_image(db, prop.id, second.id)
    reloaded = await property_svc.get_property(db, prop.id, user.id)
    assert reloaded.primary_image.id == second.id
    assert [img.is_primary for img in reloaded.images] == [False, True]


@pytest.mark.asyncio
async def test_set_primary_for_wrong_property_raises(db: AsyncSession, user: User, store):
    a = await _listing(db, user)
    b = await _listing(db, user, title="Other")
    image = await property_image_svc.upload_property_image(
        db, store, a.id, user.id, filename="x.jpg", data=b"x"
    )
    with pytest.raises(NotFoundError):
        await property_image_svc.set_primary_image(db, b.id, image.id)


@pytest.mark.asyncio
async def test_delete_property_removes_files(db: AsyncSession, user: User, store):
    prop = await _listing(db, user)
    image = await property_image_svc.upload_property_image(
        db, store, prop.id, user.id, filename="front.jpg", data=b"jpeg"
    )
    assert await property_svc.delete_property(db, prop.id, user.id, store) is True
    assert not store.exists(image.storage_key)
    assert await property_svc.get_property(db, prop.id, user.id) is None


@pytest.mark.asyncio
async def test_default_property_types_seeded_once(db: AsyncSession):
    assert await property_type_svc.ensure_default_property_types(db) == len(property_type_svc.DEFAULT_PROPERTY_TYPES)
    assert await property_type_svc.ensure_default_property_types(db) == 0

    residential = await property_type_svc.get_property_types_by_category(db, "residential")
    assert residential
    assert all(t.category == "residential" for t in residential)
