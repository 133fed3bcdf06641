"""Contact service - CRUD for contacts and their embedded task lists."""

import logging
import uuid
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cockpit.db.models import Contact
from cockpit.schemas.contact import ContactCreate, ContactUpdate, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


class DuplicateContactError(Exception):
    """Raised when a contact with the same name already exists in the organisation."""

    def __init__(self, name: str, organization: str | None):
        self.name = name
        self.organization = organization
        where = f"in {organization}" if organization else "without an organisation"
        super().__init__(f"Contact '{name}' already exists {where}")


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Contacts
# =============================================================================

def get_contacts(db: Session) -> list[Contact]:
    """List all contacts, newest first."""
    try:
        return db.query(Contact).order_by(Contact.created_at.desc()).all()
    except SQLAlchemyError:
        logger.exception("Failed to load contacts")
        return []


def get_contact(db: Session, contact_id: UUID) -> Contact | None:
    return db.query(Contact).filter(Contact.id == contact_id).first()


def find_duplicate(db: Session, name: str, organization: str | None) -> Contact | None:
    """Same name in the same organisation, or same name with no organisation."""
    query = db.query(Contact).filter(Contact.name == name)
    if organization:
        query = query.filter(Contact.organization == organization)
    else:
        query = query.filter(Contact.organization.is_(None))
    return query.first()


def create_contact(db: Session, data: ContactCreate) -> Contact | None:
    """
    Create a contact after the duplicate check.

    Raises:
        DuplicateContactError: name already taken within the organisation
    """
    if find_duplicate(db, data.name, data.organization):
        raise DuplicateContactError(data.name, data.organization)

    payload = data.model_dump()
    contact = Contact(**payload)
    try:
        db.add(contact)
        db.commit()
        db.refresh(contact)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create contact")
        return None
    return contact


def update_contact(db: Session, contact_id: UUID, data: ContactUpdate) -> Contact | None:
    """Apply a partial update. Returns None if the contact is missing or the write fails."""
    contact = get_contact(db, contact_id)
    if not contact:
        return None

    updates = data.model_dump(exclude_unset=True)
    for field, value in updates.items():
        setattr(contact, field, value)
    contact.updated_at = _now_utc()

    try:
        db.commit()
        db.refresh(contact)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update contact", extra={"entity_id": str(contact_id)})
        return None
    return contact


def delete_contact(db: Session, contact_id: UUID) -> bool:
    contact = get_contact(db, contact_id)
    if not contact:
        return False
    try:
        db.delete(contact)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete contact", extra={"entity_id": str(contact_id)})
        return False
    return True


# =============================================================================
# Embedded tasks
# =============================================================================

def _save_tasks(db: Session, contact: Contact, tasks: list[dict]) -> Contact | None:
    # Assign a new list so the JSON column is flagged dirty
    contact.tasks = tasks
    contact.updated_at = _now_utc()
    try:
        db.commit()
        db.refresh(contact)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to save contact tasks", extra={"entity_id": str(contact.id)})
        return None
    return contact


def add_task(db: Session, contact_id: UUID, data: TaskCreate) -> Contact | None:
    contact = get_contact(db, contact_id)
    if not contact:
        return None
    task = data.model_dump()
    task["id"] = uuid.uuid4().hex
    task["created_at"] = _now_utc().isoformat()
    return _save_tasks(db, contact, [*contact.tasks, task])


def update_task(
    db: Session, contact_id: UUID, task_id: str, data: TaskUpdate
) -> Contact | None:
    """Merge updates into one task. None when the contact or task does not exist."""
    contact = get_contact(db, contact_id)
    if not contact:
        return None

    updates = data.model_dump(exclude_unset=True)
    tasks = []
    found = False
    for task in contact.tasks:
        if task.get("id") == task_id:
            task = {**task, **updates}
            found = True
        tasks.append(task)
    if not found:
        return None
    return _save_tasks(db, contact, tasks)


def remove_task(db: Session, contact_id: UUID, task_id: str) -> Contact | None:
    contact = get_contact(db, contact_id)
    if not contact:
        return None
    tasks = [t for t in contact.tasks if t.get("id") != task_id]
    if len(tasks) == len(contact.tasks):
        return None
    return _save_tasks(db, contact, tasks)
