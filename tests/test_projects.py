"""Tests for projects: title/name aliasing, type filter and updates."""

import pytest
from pydantic import ValidationError

from cockpit.schemas.project import ProjectCreate, ProjectUpdate
from cockpit.services import project_service


def test_name_takes_priority_over_title():
    data = ProjectCreate(title="Old", name="  New  ")
    assert data.title == "New"
    assert data.name == "New"


def test_title_or_name_required():
    with pytest.raises(ValidationError):
        ProjectCreate(title="  ")


def test_update_maps_name_to_title(db):
    project = project_service.create_project(db, ProjectCreate(title="Alpha"))

    updated = project_service.update_project(db, project.id, ProjectUpdate(name="Beta"))
    assert updated.title == "Beta"

    # Blank titles are ignored rather than clearing the project
    updated = project_service.update_project(db, project.id, ProjectUpdate(title=" ", status="done"))
    assert updated.title == "Beta"
    assert updated.status == "done"


def test_read_model_mirrors_title(db):
    project = project_service.create_project(db, ProjectCreate(name="Gamma"))
    read = project_service.to_project_read(project)
    assert read.title == read.name == "Gamma"
    assert read.organisation_ids == []
    assert read.project_type == "mb-2.0"


@pytest.mark.asyncio
async def test_project_api_crud(authed_client):
    response = await authed_client.post(
        "/api/projects", json={"name": "Website", "project_type": "internal", "priority": "prio"}
    )
    assert response.status_code == 201
    project = response.json()
    assert project["title"] == "Website"
    assert project["name"] == "Website"
    assert project["status"] == "ongoing"

    response = await authed_client.patch(f"/api/projects/{project['id']}", json={"name": "Website v2"})
    assert response.json()["title"] == "Website v2"

    response = await authed_client.delete(f"/api/projects/{project['id']}")
    assert response.status_code == 204
    assert (await authed_client.get(f"/api/projects/{project['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_filter_by_type(authed_client):
    await authed_client.post("/api/projects", json={"name": "A", "project_type": "internal"})
    await authed_client.post("/api/projects", json={"name": "B"})

    response = await authed_client.get("/api/projects", params={"type": "internal"})
    assert [p["name"] for p in response.json()] == ["A"]

    response = await authed_client.get("/api/projects")
    assert len(response.json()) == 2

    response = await authed_client.get("/api/projects", params={"type": "unknown"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_without_title_is_422(authed_client):
    response = await authed_client.post("/api/projects", json={"description": "no title"})
    assert response.status_code == 422
