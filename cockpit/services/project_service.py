"""Project service - CRUD, type filter and contact linking."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cockpit.db.models import Contact, Project
from cockpit.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_project_read(project: Project) -> ProjectRead:
    """Expose `title` under both names and default the list columns to []."""
    return ProjectRead(
        id=project.id,
        title=project.title,
        name=project.title,
        description=project.description,
        status=project.status or "ongoing",
        project_type=project.project_type,
        priority=project.priority,
        organisation_ids=project.organisation_ids or [],
        categories=project.categories or [],
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


def get_projects(db: Session) -> list[Project]:
    try:
        return db.query(Project).order_by(Project.created_at.desc()).all()
    except SQLAlchemyError:
        logger.exception("Failed to load projects")
        return []


def get_projects_by_type(db: Session, project_type: str) -> list[Project]:
    try:
        return (
            db.query(Project)
            .filter(Project.project_type == project_type)
            .order_by(Project.created_at.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Failed to load projects by type")
        return []


def get_project(db: Session, project_id: UUID) -> Project | None:
    return db.query(Project).filter(Project.id == project_id).first()


def create_project(db: Session, data: ProjectCreate) -> Project | None:
    payload = data.model_dump(exclude={"name"})
    project = Project(**payload)
    try:
        db.add(project)
        db.commit()
        db.refresh(project)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create project")
        return None
    return project


def update_project(db: Session, project_id: UUID, data: ProjectUpdate) -> Project | None:
    project = get_project(db, project_id)
    if not project:
        return None

    updates = data.model_dump(exclude_unset=True)
    alias = updates.pop("name", None)
    if alias:
        updates["title"] = alias
    if "title" in updates and not (updates["title"] or "").strip():
        updates.pop("title")

    for field, value in updates.items():
        setattr(project, field, value)
    project.updated_at = _now_utc()
    try:
        db.commit()
        db.refresh(project)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update project", extra={"entity_id": str(project_id)})
        return None
    return project


def delete_project(db: Session, project_id: UUID) -> bool:
    project = get_project(db, project_id)
    if not project:
        return False
    try:
        db.delete(project)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete project", extra={"entity_id": str(project_id)})
        return False
    return True


def link_project_to_contact(
    db: Session, contact_id: UUID, data: ProjectCreate
) -> tuple[Project | None, Contact | None]:
    """
    Create a project, then append its id to the contact's `projects`.

    The two writes commit separately: if the second fails the project
    still exists and the returned contact is None.
    """
    contact = db.query(Contact).filter(Contact.id == contact_id).first()
    if not contact:
        return None, None

    project = create_project(db, data)
    if not project:
        return None, contact

    project_id = str(project.id)
    if project_id not in contact.projects:
        contact.projects = [*contact.projects, project_id]
        contact.updated_at = _now_utc()
    try:
        db.commit()
        db.refresh(contact)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to link project to contact", extra={"entity_id": str(contact_id)})
        return project, None
    return project, contact
