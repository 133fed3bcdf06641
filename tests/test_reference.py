"""Tests for reference lists (categories, roles, locations, sectors)."""

import pytest

from cockpit.services import reference_service
from cockpit.services.reference_service import DuplicateNameError


def test_names_sorted_and_trimmed(db):
    reference_service.create_category(db, "  Partner ")
    reference_service.create_category(db, "Client")
    assert reference_service.get_categories(db) == ["Client", "Partner"]


def test_duplicate_name_raises(db):
    reference_service.create_role(db, "CEO")
    with pytest.raises(DuplicateNameError):
        reference_service.create_role(db, " CEO ")


def test_sector_slug_is_unique(db):
    sector = reference_service.add_sector(db, "Real Estate & Construction")
    assert sector.slug == "real-estate-construction"
    with pytest.raises(DuplicateNameError):
        reference_service.add_sector(db, "real estate / construction")


def test_sector_name_without_slug_rejected(db):
    with pytest.raises(ValueError):
        reference_service.add_sector(db, "!!!")
    assert reference_service.get_sectors(db) == []


def test_delete_by_name(db):
    reference_service.create_role(db, "CTO")
    assert reference_service.delete_role_by_name(db, "CTO") is True
    assert reference_service.delete_role_by_name(db, "CTO") is False
    assert reference_service.get_roles(db) == []


def test_seed_is_idempotent(db):
    reference_service.create_category(db, "Client")
    first = reference_service.seed_reference_lists(db)
    second = reference_service.seed_reference_lists(db)

    assert first == len(reference_service.DEFAULT_CATEGORIES) - 1 + len(reference_service.DEFAULT_ROLES)
    assert second == 0
    assert "Government" in reference_service.get_categories(db)


@pytest.mark.asyncio
async def test_categories_api(authed_client):
    response = await authed_client.post("/api/categories", json={"name": " Investor "})
    assert response.status_code == 201
    category = response.json()
    assert category["name"] == "Investor"

    assert (await authed_client.post("/api/categories", json={"name": "Investor"})).status_code == 409
    assert (await authed_client.post("/api/categories", json={"name": "  "})).status_code == 422

    assert (await authed_client.get("/api/categories")).json() == ["Investor"]

    response = await authed_client.delete(f"/api/categories/{category['id']}")
    assert response.status_code == 204
    response = await authed_client.delete(f"/api/categories/{category['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_roles_delete_by_name_api(authed_client):
    await authed_client.post("/api/roles", json={"name": "Lawyer"})

    response = await authed_client.delete("/api/roles", params={"name": "Lawyer"})
    assert response.status_code == 204
    assert (await authed_client.get("/api/roles")).json() == []


@pytest.mark.asyncio
async def test_locations_and_sectors_api(authed_client):
    await authed_client.post("/api/locations", json={"name": "Warsaw"})
    await authed_client.post("/api/locations", json={"name": "Berlin"})
    response = await authed_client.get("/api/locations")
    assert [loc["name"] for loc in response.json()] == ["Berlin", "Warsaw"]

    response = await authed_client.post("/api/sectors", json={"name": "Fintech"})
    assert response.status_code == 201
    sector = response.json()
    assert sector["slug"] == "fintech"

    assert (await authed_client.post("/api/sectors", json={"name": "FinTech"})).status_code == 409
    assert (await authed_client.post("/api/sectors", json={"name": "&&"})).status_code == 422
    assert (await authed_client.delete(f"/api/sectors/{sector['id']}")).status_code == 204
    assert (await authed_client.get("/api/sectors")).json() == []
