"""Test property and deal document API routes."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

LISTING = {
    "title": "Lake house",
    "address": "1 Shore Dr",
    "city": "Austin",
    "state": "TX",
    "property_type": "Single Family",
    "list_price": 800000,
}


@pytest.mark.asyncio
async def test_create_and_filter_properties(auth_client: AsyncClient):
    resp = await auth_client.post("/api/properties", json=LISTING)
    assert resp.status_code == 201
    created = resp.json()
    assert created["primary_image"] is None
    assert created["listing_type"] == "my_listing"

    await auth_client.post("/api/properties", json={**LISTING, "title": "Wishlist", "listing_type": "client_interest"})

    listed = await auth_client.get("/api/properties", params={"listing_type": "client_interest"})
    assert [p["title"] for p in listed.json()] == ["Wishlist"]

    stats = (await auth_client.get("/api/properties/stats")).json()
    assert stats["total"] == 2


@pytest.mark.asyncio
async def test_upload_single_image_becomes_primary(auth_client: AsyncClient, store):
    prop = (await auth_client.post("/api/properties", json=LISTING)).json()

    resp = await auth_client.post(
        f"/api/properties/{prop['id']}/images",
        files=[("files", ("front.jpg", b"jpegdata", "image/jpeg"))],
        data={"image_type": "exterior"},
    )
    assert resp.status_code == 201
    [image] = resp.json()
    assert image["is_primary"] is True
    assert image["image_type"] == "exterior"
    assert image["image_url"].startswith("/files/")

    detail = (await auth_client.get(f"/api/properties/{prop['id']}")).json()
    assert detail["primary_image"]["id"] == image["id"]


@pytest.mark.asyncio
async def test_bulk_upload_and_reorder(auth_client: AsyncClient):
    prop = (await auth_client.post("/api/properties", json=LISTING)).json()
    resp = await auth_client.post(
        f"/api/properties/{prop['id']}/images",
        files=[
            ("files", ("a.jpg", b"a", "image/jpeg")),
            ("files", ("b.jpg", b"b", "image/jpeg")),
        ],
    )
    a, b = resp.json()
    assert a["is_primary"] and not b["is_primary"]

    reordered = await auth_client.post(
        f"/api/properties/{prop['id']}/images/reorder", json={"image_ids": [b["id"], a["id"]]}
    )
    assert reordered.status_code == 200
    images = (await auth_client.get(f"/api/properties/{prop['id']}/images")).json()
    assert [img["id"] for img in images] == [b["id"], a["id"]]


@pytest.mark.asyncio
async def test_deal_document_upload_and_download(auth_client: AsyncClient, store):
    deal = (await auth_client.post("/api/deals", json={"title": "Shore Dr sale", "price": 800000})).json()

    resp = await auth_client.post(
        f"/api/deals/{deal['id']}/documents",
        files={"file": ("contract.pdf", b"%PDF-1.4", "application/pdf")},
        data={"name": "Purchase contract"},
    )
    assert resp.status_code == 201
    doc = resp.json()
    assert doc["name"] == "Purchase contract"
    assert doc["file_size"] == 8

    download = await auth_client.get(f"/api/deals/{deal['id']}/documents/{doc['id']}/download")
    assert download.status_code == 200
    assert download.content == b"%PDF-1.4"
    assert 'filename="contract.pdf"' in download.headers["content-disposition"]

    assert (await auth_client.delete(f"/api/deals/{deal['id']}/documents/{doc['id']}")).status_code == 200
    assert (await auth_client.get(f"/api/deals/{deal['id']}/documents")).json() == []


@pytest.mark.asyncio
async def test_deal_search_by_contact_name(auth_client: AsyncClient):
    contact = (await auth_client.post("/api/contacts", json={"first_name": "Maria", "last_name": "Lopez"})).json()
    await auth_client.post("/api/deals", json={"title": "Condo purchase", "contact_id": contact["id"], "status": "proposal"})
    await auth_client.post("/api/deals", json={"title": "Unrelated"})

    resp = await auth_client.get("/api/deals/search", params={"q": "lopez", "status": "all"})
    [deal] = resp.json()
    assert deal["title"] == "Condo purchase"
    assert deal["contact"]["last_name"] == "Lopez"

    resp = await auth_client.get("/api/deals/search", params={"q": "lopez", "status": "closed_won"})
    assert resp.json() == []
