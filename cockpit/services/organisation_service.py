"""Organisation service - CRUD plus contact-derived helpers."""

import logging
from collections import Counter
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cockpit.db.models import Contact, Organisation
from cockpit.schemas.organisation import OrganisationCreate, OrganisationUpdate

logger = logging.getLogger(__name__)

INHERITABLE_FIELDS = ("website", "location", "sector", "categories")


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def get_organisations(db: Session) -> list[Organisation]:
    """List all organisations, newest first."""
    try:
        return db.query(Organisation).order_by(Organisation.created_at.desc()).all()
    except SQLAlchemyError:
        logger.exception("Failed to load organisations")
        return []


def get_organisation(db: Session, org_id: UUID) -> Organisation | None:
    return db.query(Organisation).filter(Organisation.id == org_id).first()


def get_organisation_by_name(db: Session, name: str) -> Organisation | None:
    return db.query(Organisation).filter(Organisation.name == name).first()


def create_organisation(db: Session, data: OrganisationCreate) -> Organisation | None:
    org = Organisation(**data.model_dump())
    if org.notes:
        org.notes_updated_at = _now_utc()
    try:
        db.add(org)
        db.commit()
        db.refresh(org)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create organisation")
        return None
    return org


def _apply_updates(db: Session, org: Organisation, updates: dict) -> Organisation | None:
    now = _now_utc()
    for field, value in updates.items():
        setattr(org, field, value)
    if "notes" in updates:
        org.notes_updated_at = now
    org.updated_at = now
    try:
        db.commit()
        db.refresh(org)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update organisation", extra={"entity_id": str(org.id)})
        return None
    return org


def update_organisation(
    db: Session, org_id: UUID, data: OrganisationUpdate
) -> Organisation | None:
    """
    Partial update.

    `notes_updated_at` is refreshed whenever `notes` is part of the update,
    even when the text is unchanged.
    """
    org = get_organisation(db, org_id)
    if not org:
        return None
    return _apply_updates(db, org, data.model_dump(exclude_unset=True))


def delete_organisation(db: Session, org_id: UUID) -> bool:
    org = get_organisation(db, org_id)
    if not org:
        return False
    try:
        db.delete(org)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete organisation", extra={"entity_id": str(org_id)})
        return False
    return True


# =============================================================================
# Contact-derived helpers
# =============================================================================

def get_contacts_for_organisation(db: Session, org_name: str) -> list[Contact]:
    """
    Contacts linked to an organisation by name.

    Matches the legacy `organization` column first, then the `organizations`
    list; each contact appears once.
    """
    try:
        by_legacy = (
            db.query(Contact)
            .filter(Contact.organization == org_name)
            .order_by(Contact.created_at)
            .all()
        )
        everyone = db.query(Contact).order_by(Contact.created_at).all()
    except SQLAlchemyError:
        logger.exception("Failed to load contacts for organisation")
        return []

    by_list = [c for c in everyone if org_name in (c.organizations or [])]

    seen: set = set()
    unique = []
    for contact in [*by_legacy, *by_list]:
        if contact.id in seen:
            continue
        seen.add(contact.id)
        unique.append(contact)
    return unique


def _most_common(values: list[str]) -> str | None:
    counts = Counter(v for v in values if v)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def inherit_properties_from_contacts(
    db: Session, org_id: UUID, fields: list[str]
) -> Organisation | None:
    """
    Fill organisation fields from its contacts.

    website: first non-empty value. location/sector: most common value.
    categories: union with the organisation's current categories.
    Returns None when the organisation is missing or nothing can be inherited.
    """
    org = get_organisation(db, org_id)
    if not org:
        return None

    contacts = get_contacts_for_organisation(db, org.name)
    if not contacts:
        return None

    updates: dict = {}
    if "website" in fields:
        websites = [c.website for c in contacts if c.website]
        if websites:
            updates["website"] = websites[0]
    if "location" in fields:
        location = _most_common([c.location for c in contacts])
        if location:
            updates["location"] = location
    if "sector" in fields:
        sector = _most_common([c.sector for c in contacts])
        if sector:
            updates["sector"] = sector
    if "categories" in fields:
        inherited = [cat for c in contacts for cat in (c.categories or [])]
        if inherited:
            merged = list(org.categories or [])
            for cat in inherited:
                if cat not in merged:
                    merged.append(cat)
            updates["categories"] = merged

    if not updates:
        return None
    return _apply_updates(db, org, updates)
