"""Contacts router - CRUD, embedded tasks and project linking."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cockpit.core.deps import api_dependencies, get_db
from cockpit.schemas.contact import (
    ContactCreate,
    ContactRead,
    ContactUpdate,
    TaskCreate,
    TaskUpdate,
)
from cockpit.schemas.project import ProjectCreate, ProjectRead
from cockpit.services import contact_service, project_service
from cockpit.services.contact_service import DuplicateContactError

router = APIRouter(dependencies=api_dependencies)


@router.get("", response_model=list[ContactRead])
def list_contacts(db: Session = Depends(get_db)):
    return contact_service.get_contacts(db)


@router.get("/{contact_id}", response_model=ContactRead)
def get_contact(contact_id: UUID, db: Session = Depends(get_db)):
    contact = contact_service.get_contact(db, contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@router.post("", response_model=ContactRead, status_code=201)
def create_contact(data: ContactCreate, db: Session = Depends(get_db)):
    """
    Create a contact.

    Rejects a second contact with the same name in the same organisation.
    """
    try:
        contact = contact_service.create_contact(db, data)
    except DuplicateContactError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if contact is None:
        raise HTTPException(status_code=500, detail="Failed to create contact")
    return contact


@router.patch("/{contact_id}", response_model=ContactRead)
def update_contact(contact_id: UUID, data: ContactUpdate, db: Session = Depends(get_db)):
    if not contact_service.get_contact(db, contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    contact = contact_service.update_contact(db, contact_id, data)
    if contact is None:
        raise HTTPException(status_code=500, detail="Failed to update contact")
    return contact


@router.delete("/{contact_id}", status_code=204)
def delete_contact(contact_id: UUID, db: Session = Depends(get_db)):
    if not contact_service.get_contact(db, contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    if not contact_service.delete_contact(db, contact_id):
        raise HTTPException(status_code=500, detail="Failed to delete contact")


# =============================================================================
# Tasks (stored on the contact)
# =============================================================================

@router.post("/{contact_id}/tasks", response_model=ContactRead, status_code=201)
def add_task(contact_id: UUID, data: TaskCreate, db: Session = Depends(get_db)):
    contact = contact_service.add_task(db, contact_id, data)
    if contact is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@router.patch("/{contact_id}/tasks/{task_id}", response_model=ContactRead)
def update_task(
    contact_id: UUID, task_id: str, data: TaskUpdate, db: Session = Depends(get_db)
):
    contact = contact_service.update_task(db, contact_id, task_id, data)
    if contact is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return contact


@router.delete("/{contact_id}/tasks/{task_id}", response_model=ContactRead)
def remove_task(contact_id: UUID, task_id: str, db: Session = Depends(get_db)):
    contact = contact_service.remove_task(db, contact_id, task_id)
    if contact is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return contact


# =============================================================================
# Projects
# =============================================================================

@router.post("/{contact_id}/projects", response_model=ProjectRead, status_code=201)
def create_project_for_contact(
    contact_id: UUID, data: ProjectCreate, db: Session = Depends(get_db)
):
    """Create a project and add it to the contact's project list."""
    project, contact = project_service.link_project_to_contact(db, contact_id, data)
    if project is None and contact is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    if project is None:
        raise HTTPException(status_code=500, detail="Failed to create project")
    if contact is None:
        # Project exists; only the link failed
        raise HTTPException(status_code=500, detail="Project created but linking to contact failed")
    return project_service.to_project_read(project)
