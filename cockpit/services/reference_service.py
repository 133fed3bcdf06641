"""Reference list service - categories, roles, locations and sectors.

Categories and roles are read as sorted name lists; locations and sectors
as full rows. Entries are created trimmed.
"""

import logging
from typing import Type, TypeVar
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cockpit.db.models import Category, Location, Role, Sector
from cockpit.utils.normalization import slugify

logger = logging.getLogger(__name__)

NamedModel = TypeVar("NamedModel", Category, Role, Location)


class DuplicateNameError(Exception):
    """Raised when a reference entry with the same name (or slug) exists."""


# =============================================================================
# Shared helpers for name-keyed tables
# =============================================================================

def _list_rows(db: Session, model: Type[NamedModel]) -> list[NamedModel]:
    try:
        return db.query(model).order_by(model.name.asc()).all()
    except SQLAlchemyError:
        logger.exception("Failed to load %s", model.__tablename__)
        return []


def _list_names(db: Session, model: Type[NamedModel]) -> list[str]:
    return [row.name for row in _list_rows(db, model)]


def _create(db: Session, model: Type[NamedModel], name: str) -> NamedModel | None:
    clean = name.strip()
    if db.query(model).filter(model.name == clean).first():
        raise DuplicateNameError(f"'{clean}' already exists")
    row = model(name=clean)
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create %s entry", model.__tablename__)
        return None
    return row


def _delete_by_id(db: Session, model, row_id) -> bool:
    row = db.query(model).filter(model.id == row_id).first()
    if not row:
        return False
    try:
        db.delete(row)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete %s entry", model.__tablename__)
        return False
    return True


def _delete_by_name(db: Session, model: Type[NamedModel], name: str) -> bool:
    row = db.query(model).filter(model.name == name).first()
    if not row:
        return False
    return _delete_by_id(db, model, row.id)


# =============================================================================
# Categories
# =============================================================================

def get_categories(db: Session) -> list[str]:
    return _list_names(db, Category)


def create_category(db: Session, name: str) -> Category | None:
    return _create(db, Category, name)


def delete_category_by_id(db: Session, category_id: UUID) -> bool:
    return _delete_by_id(db, Category, category_id)


def delete_category_by_name(db: Session, name: str) -> bool:
    return _delete_by_name(db, Category, name)


# =============================================================================
# Roles
# =============================================================================

def get_roles(db: Session) -> list[str]:
    return _list_names(db, Role)


def create_role(db: Session, name: str) -> Role | None:
    return _create(db, Role, name)


def delete_role_by_id(db: Session, role_id: UUID) -> bool:
    return _delete_by_id(db, Role, role_id)


def delete_role_by_name(db: Session, name: str) -> bool:
    return _delete_by_name(db, Role, name)


# =============================================================================
# Locations
# =============================================================================

def get_locations(db: Session) -> list[Location]:
    return _list_rows(db, Location)


def add_location(db: Session, name: str) -> Location | None:
    return _create(db, Location, name)


def delete_location(db: Session, location_id: UUID) -> bool:
    return _delete_by_id(db, Location, location_id)


# =============================================================================
# Sectors
# =============================================================================

def get_sectors(db: Session) -> list[Sector]:
    try:
        return db.query(Sector).order_by(Sector.name.asc()).all()
    except SQLAlchemyError:
        logger.exception("Failed to load sectors")
        return []


def add_sector(db: Session, name: str) -> Sector | None:
    clean = name.strip()
    slug = slugify(clean)
    if not slug:
        raise ValueError("Sector name must contain letters or digits")
    if db.query(Sector).filter(Sector.slug == slug).first():
        raise DuplicateNameError(f"Sector '{clean}' already exists")
    sector = Sector(name=clean, slug=slug)
    try:
        db.add(sector)
        db.commit()
        db.refresh(sector)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create sector")
        return None
    return sector


def delete_sector(db: Session, sector_id: int) -> bool:
    return _delete_by_id(db, Sector, sector_id)


# =============================================================================
# Seeding
# =============================================================================

DEFAULT_CATEGORIES = ("Client", "Partner", "Investor", "Supplier", "Government")
DEFAULT_ROLES = ("CEO", "CTO", "Founder", "Lawyer", "Accountant")


def seed_reference_lists(db: Session) -> int:
    """Insert the default categories and roles that are missing. Returns rows added."""
    added = 0
    for model, names in ((Category, DEFAULT_CATEGORIES), (Role, DEFAULT_ROLES)):
        existing = set(_list_names(db, model))
        for name in names:
            if name not in existing:
                db.add(model(name=name))
                added += 1
    db.commit()
    return added
