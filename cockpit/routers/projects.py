"""Projects router."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cockpit.core.deps import api_dependencies, get_db
from cockpit.db.enums import ProjectType
from cockpit.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from cockpit.services import project_service

router = APIRouter(dependencies=api_dependencies)


@router.get("", response_model=list[ProjectRead])
def list_projects(
    project_type: ProjectType | None = Query(default=None, alias="type"),
    db: Session = Depends(get_db),
):
    if project_type:
        projects = project_service.get_projects_by_type(db, project_type.value)
    else:
        projects = project_service.get_projects(db)
    return [project_service.to_project_read(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectRead)
def get_project(project_id: UUID, db: Session = Depends(get_db)):
    project = project_service.get_project(db, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project_service.to_project_read(project)


@router.post("", response_model=ProjectRead, status_code=201)
def create_project(data: ProjectCreate, db: Session = Depends(get_db)):
    project = project_service.create_project(db, data)
    if project is None:
        raise HTTPException(status_code=500, detail="Failed to create project")
    return project_service.to_project_read(project)


@router.patch("/{project_id}", response_model=ProjectRead)
def update_project(project_id: UUID, data: ProjectUpdate, db: Session = Depends(get_db)):
    if not project_service.get_project(db, project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    project = project_service.update_project(db, project_id, data)
    if project is None:
        raise HTTPException(status_code=500, detail="Failed to update project")
    return project_service.to_project_read(project)


@router.delete("/{project_id}", status_code=204)
def delete_project(project_id: UUID, db: Session = Depends(get_db)):
    if not project_service.get_project(db, project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    if not project_service.delete_project(db, project_id):
        raise HTTPException(status_code=500, detail="Failed to delete project")
