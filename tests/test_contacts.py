"""Tests for contacts: duplicate rules, validation, partial updates and tasks."""

import pytest

from cockpit.schemas.contact import ContactCreate, TaskCreate, TaskUpdate
from cockpit.services import contact_service
from cockpit.services.contact_service import DuplicateContactError


# =============================================================================
# Service
# =============================================================================

def test_create_contact_normalizes_fields(db):
    contact = contact_service.create_contact(
        db, ContactCreate(name="  Ada Lovelace ", email=" ADA@Example.com ", organization="  ")
    )
    assert contact.name == "Ada Lovelace"
    assert contact.email == "ada@example.com"
    assert contact.organization is None
    assert contact.status == "mid"
    assert contact.tasks == []


def test_duplicate_name_same_organisation_rejected(db):
    contact_service.create_contact(db, ContactCreate(name="Ada", organization="Acme"))
    with pytest.raises(DuplicateContactError):
        contact_service.create_contact(db, ContactCreate(name="Ada", organization="Acme"))


def test_same_name_different_organisation_allowed(db):
    contact_service.create_contact(db, ContactCreate(name="Ada", organization="Acme"))
    other = contact_service.create_contact(db, ContactCreate(name="Ada", organization="Globex"))
    assert other is not None
    assert len(contact_service.get_contacts(db)) == 2


def test_duplicate_without_organisation_rejected(db):
    contact_service.create_contact(db, ContactCreate(name="Ada"))
    with pytest.raises(DuplicateContactError):
        contact_service.create_contact(db, ContactCreate(name="Ada", organization=""))


def test_contacts_listed_newest_first(db):
    first = contact_service.create_contact(db, ContactCreate(name="First"))
    second = contact_service.create_contact(db, ContactCreate(name="Second"))
    ids = [c.id for c in contact_service.get_contacts(db)]
    assert ids.index(second.id) < ids.index(first.id)


def test_task_lifecycle(db):
    contact = contact_service.create_contact(db, ContactCreate(name="Ada"))

    contact = contact_service.add_task(db, contact.id, TaskCreate(text="Send NDA"))
    assert len(contact.tasks) == 1
    task = contact.tasks[0]
    assert task["status"] == "ongoing"
    assert task["id"]

    contact = contact_service.update_task(
        db, contact.id, task["id"], TaskUpdate(completed=True, status="done")
    )
    assert contact.tasks[0]["completed"] is True
    assert contact.tasks[0]["status"] == "done"
    assert contact.tasks[0]["text"] == "Send NDA"

    assert contact_service.update_task(db, contact.id, "missing", TaskUpdate(text="x")) is None

    contact = contact_service.remove_task(db, contact.id, task["id"])
    assert contact.tasks == []


# =============================================================================
# API
# =============================================================================

@pytest.mark.asyncio
async def test_create_contact_endpoint(authed_client):
    response = await authed_client.post(
        "/api/contacts",
        json={"name": "Grace Hopper", "organization": "Navy", "status": "high prio"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Grace Hopper"
    assert body["status"] == "high prio"
    assert body["categories"] == []


@pytest.mark.asyncio
async def test_blank_name_rejected_before_create(authed_client, monkeypatch):
    calls = []
    monkeypatch.setattr(contact_service, "create_contact", lambda *a, **kw: calls.append(a))

    response = await authed_client.post("/api/contacts", json={"name": "   "})

    assert response.status_code == 422
    assert calls == []


@pytest.mark.asyncio
async def test_duplicate_contact_returns_409(authed_client):
    payload = {"name": "Ada", "organization": "Acme"}
    assert (await authed_client.post("/api/contacts", json=payload)).status_code == 201

    response = await authed_client.post("/api/contacts", json=payload)
    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]

    other = await authed_client.post("/api/contacts", json={"name": "Ada", "organization": "Globex"})
    assert other.status_code == 201


@pytest.mark.asyncio
async def test_update_contact_is_partial(authed_client):
    created = (
        await authed_client.post(
            "/api/contacts", json={"name": "Ada", "role": "CTO", "location": "London"}
        )
    ).json()

    response = await authed_client.patch(
        f"/api/contacts/{created['id']}", json={"location": "Paris"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["location"] == "Paris"
    assert body["role"] == "CTO"


@pytest.mark.asyncio
async def test_update_missing_contact_404(authed_client):
    response = await authed_client.patch(
        "/api/contacts/00000000-0000-0000-0000-000000000000", json={"role": "CEO"}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_contact(authed_client):
    created = (await authed_client.post("/api/contacts", json={"name": "Ada"})).json()

    response = await authed_client.delete(f"/api/contacts/{created['id']}")
    assert response.status_code == 204
    assert (await authed_client.get(f"/api/contacts/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_task_endpoints(authed_client):
    created = (await authed_client.post("/api/contacts", json={"name": "Ada"})).json()

    response = await authed_client.post(
        f"/api/contacts/{created['id']}/tasks",
        json={"text": "Call back", "assignees": ["someone"]},
    )
    assert response.status_code == 201
    task_id = response.json()["tasks"][0]["id"]

    response = await authed_client.patch(
        f"/api/contacts/{created['id']}/tasks/{task_id}", json={"completed": True}
    )
    assert response.json()["tasks"][0]["completed"] is True

    response = await authed_client.delete(f"/api/contacts/{created['id']}/tasks/{task_id}")
    assert response.json()["tasks"] == []


@pytest.mark.asyncio
async def test_create_project_for_contact(authed_client):
    created = (await authed_client.post("/api/contacts", json={"name": "Ada"})).json()

    response = await authed_client.post(
        f"/api/contacts/{created['id']}/projects", json={"name": "Engine"}
    )
    assert response.status_code == 201
    project = response.json()
    assert project["title"] == "Engine"

    contact = (await authed_client.get(f"/api/contacts/{created['id']}")).json()
    assert contact["projects"] == [project["id"]]
