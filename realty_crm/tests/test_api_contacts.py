"""Test contact, task and communication API routes."""

from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient


async def _create_contact(client: AsyncClient, **overrides) -> dict:
    body = {"first_name": "Jane", "last_name": "Doe", "email": "jane@x.com", "contact_type": "buyer"}
    body.update(overrides)
    resp = await client.post("/api/contacts", json=body)
    assert resp.status_code == 201
    return resp.json()


@pytest.mark.asyncio
async def test_create_and_search_contact(auth_client: AsyncClient):
    created = await _create_contact(auth_client)
    assert created["status"] == "new"

    resp = await auth_client.get("/api/contacts/search", params={"q": "jane"})
    assert resp.status_code == 200
    [row] = resp.json()
    assert row["id"] == created["id"]
    assert row["communication_count"] == 0
    assert row["deal_count"] == 0
    assert row["task_count"] == 0


@pytest.mark.asyncio
async def test_invalid_contact_type_rejected(auth_client: AsyncClient):
    resp = await auth_client.post(
        "/api/contacts", json={"first_name": "X", "last_name": "Y", "contact_type": "alien"}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_contact_detail_and_delete(auth_client: AsyncClient):
    created = await _create_contact(auth_client)

    detail = await auth_client.get(f"/api/contacts/{created['id']}")
    assert detail.status_code == 200
    body = detail.json()
    assert body["deals"] == []
    assert body["communications"] == []

    assert (await auth_client.delete(f"/api/contacts/{created['id']}")).status_code == 200
    assert (await auth_client.get(f"/api/contacts/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_patch_contact(auth_client: AsyncClient):
    created = await _create_contact(auth_client)
    resp = await auth_client.patch(f"/api/contacts/{created['id']}", json={"status": "qualified"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "qualified"
    assert resp.json()["first_name"] == "Jane"

    by_status = await auth_client.get("/api/contacts/status/qualified")
    assert [c["id"] for c in by_status.json()] == [created["id"]]


@pytest.mark.asyncio
async def test_unknown_contact_is_404(auth_client: AsyncClient):
    resp = await auth_client.patch(f"/api/contacts/{uuid.uuid4()}", json={"status": "lost"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_task_lifecycle(auth_client: AsyncClient):
    contact = await _create_contact(auth_client)
    resp = await auth_client.post("/api/tasks", json={
        "title": "Send listing packet",
        "contact_id": contact["id"],
        "due_date": "2026-07-01T16:00:00Z",
    })
    assert resp.status_code == 201
    task = resp.json()
    assert task["status"] == "pending"

    done = await auth_client.post(f"/api/tasks/{task['id']}/complete")
    assert done.status_code == 200
    assert done.json()["id"] == task["id"]
    assert done.json()["completed_at"] is not None

    contact_tasks = await auth_client.get(f"/api/contacts/{contact['id']}/tasks")
    assert [t["id"] for t in contact_tasks.json()] == [task["id"]]


@pytest.mark.asyncio
async def test_patch_unknown_task_is_404(auth_client: AsyncClient):
    resp = await auth_client.patch(f"/api/tasks/{uuid.uuid4()}", json={"title": "Ghost"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_task_types(auth_client: AsyncClient):
    resp = await auth_client.post("/api/task-types", json={"name": "Staging"})
    assert resp.status_code == 201

    dup = await auth_client.post("/api/task-types", json={"name": "staging"})
    assert dup.status_code == 422
    assert dup.json()["detail"] == "Task type already exists"

    types = (await auth_client.get("/api/task-types")).json()["types"]
    assert types[0] == "Lead Management"
    assert "Staging" in types


@pytest.mark.asyncio
async def test_log_communication(auth_client: AsyncClient):
    contact = await _create_contact(auth_client)
    resp = await auth_client.post("/api/communications", json={
        "contact_id": contact["id"],
        "type": "email",
        "direction": "outbound",
        "subject": "Comps",
        "content": "Attached are the comps.",
        "metadata": {"thread": "abc"},
    })
    assert resp.status_code == 201
    assert resp.json()["metadata"] == {"thread": "abc"}

    listed = await auth_client.get(f"/api/contacts/{contact['id']}/communications")
    assert [c["subject"] for c in listed.json()] == ["Comps"]

    [row] = (await auth_client.get("/api/contacts/search", params={"q": "jane"})).json()
    assert row["communication_count"] == 1


@pytest.mark.asyncio
async def test_other_agents_contacts_hidden(auth_client: AsyncClient, db, other_user):
    from realty_crm.services import contact_svc

    theirs = await contact_svc.create_contact(db, other_user.id, first_name="Hidden", last_name="Lead")
    assert (await auth_client.get(f"/api/contacts/{theirs.id}")).status_code == 404
    assert (await auth_client.get("/api/contacts")).json() == []
