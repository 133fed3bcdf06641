"""Tests for organisations: notes timestamp, contact lookup and property inheritance."""

import pytest

from cockpit.schemas.contact import ContactCreate
from cockpit.schemas.organisation import OrganisationCreate, OrganisationUpdate
from cockpit.services import contact_service, organisation_service


def _org(db, name="Acme", **fields):
    return organisation_service.create_organisation(db, OrganisationCreate(name=name, **fields))


def _contact(db, name, **fields):
    return contact_service.create_contact(db, ContactCreate(name=name, **fields))


def test_create_sets_notes_timestamp_only_with_notes(db):
    assert _org(db, "Plain").notes_updated_at is None
    assert _org(db, "Noted", notes="Met at fair").notes_updated_at is not None


def test_update_touches_notes_timestamp_when_notes_sent(db):
    org = _org(db)
    assert org.notes_updated_at is None

    org = organisation_service.update_organisation(db, org.id, OrganisationUpdate(website="acme.io"))
    assert org.notes_updated_at is None

    org = organisation_service.update_organisation(db, org.id, OrganisationUpdate(notes=""))
    assert org.notes_updated_at is not None


def test_contacts_for_organisation_dedupes(db):
    legacy = _contact(db, "Legacy", organization="Acme")
    listed = _contact(db, "Listed", organizations=["Acme", "Globex"])
    both = _contact(db, "Both", organization="Acme", organizations=["Acme"])
    _contact(db, "Other", organization="Globex")

    contacts = organisation_service.get_contacts_for_organisation(db, "Acme")

    ids = [c.id for c in contacts]
    assert len(ids) == len(set(ids)) == 3
    assert set(ids) == {legacy.id, listed.id, both.id}


def test_inherit_properties(db):
    org = _org(db, categories=["Client"])
    _contact(db, "A", organization="Acme", website="https://acme.io", location="Warsaw",
             sector="Fintech", categories=["Partner"])
    _contact(db, "B", organization="Acme", location="Berlin", sector="Fintech",
             categories=["Client", "Investor"])
    _contact(db, "C", organizations=["Acme"], location="Warsaw", website="https://other.io")

    updated = organisation_service.inherit_properties_from_contacts(
        db, org.id, ["website", "location", "sector", "categories"]
    )

    assert updated.website == "https://acme.io"
    assert updated.location == "Warsaw"
    assert updated.sector == "Fintech"
    assert updated.categories == ["Client", "Partner", "Investor"]


def test_inherit_returns_none_without_contacts(db):
    org = _org(db)
    assert organisation_service.inherit_properties_from_contacts(db, org.id, ["website"]) is None


def test_inherit_returns_none_when_nothing_to_copy(db):
    org = _org(db)
    _contact(db, "A", organization="Acme")
    assert organisation_service.inherit_properties_from_contacts(db, org.id, ["website"]) is None


# =============================================================================
# API
# =============================================================================

@pytest.mark.asyncio
async def test_organisation_crud(authed_client):
    response = await authed_client.post(
        "/api/organisations", json={"name": "Acme", "status": "ongoing", "priority": "prio"}
    )
    assert response.status_code == 201
    org = response.json()
    assert org["priority"] == "prio"

    duplicate = await authed_client.post("/api/organisations", json={"name": "Acme"})
    assert duplicate.status_code == 409

    response = await authed_client.patch(f"/api/organisations/{org['id']}", json={"notes": "hello"})
    assert response.status_code == 200
    assert response.json()["notes_updated_at"] is not None

    response = await authed_client.delete(f"/api/organisations/{org['id']}")
    assert response.status_code == 204
    assert (await authed_client.get(f"/api/organisations/{org['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_rename_to_existing_name_is_409(authed_client):
    await authed_client.post("/api/organisations", json={"name": "Acme"})
    other = (await authed_client.post("/api/organisations", json={"name": "Globex"})).json()

    response = await authed_client.patch(f"/api/organisations/{other['id']}", json={"name": "Acme"})
    assert response.status_code == 409

    # Keeping its own name is not a conflict
    response = await authed_client.patch(f"/api/organisations/{other['id']}", json={"name": "Globex"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_invalid_status_rejected(authed_client):
    response = await authed_client.post("/api/organisations", json={"name": "Acme", "status": "closed"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_organisation_contacts_and_inherit_endpoints(authed_client):
    org = (await authed_client.post("/api/organisations", json={"name": "Acme"})).json()
    await authed_client.post(
        "/api/contacts", json={"name": "A", "organization": "Acme", "sector": "Legal"}
    )

    contacts = (await authed_client.get(f"/api/organisations/{org['id']}/contacts")).json()
    assert [c["name"] for c in contacts] == ["A"]

    response = await authed_client.post(
        f"/api/organisations/{org['id']}/inherit", json={"fields": ["sector"]}
    )
    assert response.status_code == 200
    assert response.json()["sector"] == "Legal"

    response = await authed_client.post(
        f"/api/organisations/{org['id']}/inherit", json={"fields": ["colour"]}
    )
    assert response.status_code == 422
