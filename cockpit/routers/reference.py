"""Reference lists router - categories, roles, locations and sectors."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cockpit.core.deps import api_dependencies, get_db
from cockpit.schemas.reference import NameCreate, NamedItemRead, SectorRead
from cockpit.services import reference_service
from cockpit.services.reference_service import DuplicateNameError

router = APIRouter(dependencies=api_dependencies)


def _created(item, label: str):
    if item is None:
        raise HTTPException(status_code=500, detail=f"Failed to create {label}")
    return item


def _deleted(ok: bool, label: str) -> None:
    if not ok:
        raise HTTPException(status_code=404, detail=f"{label} not found")


# =============================================================================
# Categories
# =============================================================================

@router.get("/categories", response_model=list[str])
def list_categories(db: Session = Depends(get_db)):
    return reference_service.get_categories(db)


@router.post("/categories", response_model=NamedItemRead, status_code=201)
def create_category(data: NameCreate, db: Session = Depends(get_db)):
    try:
        return _created(reference_service.create_category(db, data.name), "category")
    except DuplicateNameError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(category_id: UUID, db: Session = Depends(get_db)):
    _deleted(reference_service.delete_category_by_id(db, category_id), "Category")


@router.delete("/categories", status_code=204)
def delete_category_by_name(name: str, db: Session = Depends(get_db)):
    _deleted(reference_service.delete_category_by_name(db, name), "Category")


# =============================================================================
# Roles
# =============================================================================

@router.get("/roles", response_model=list[str])
def list_roles(db: Session = Depends(get_db)):
    return reference_service.get_roles(db)


@router.post("/roles", response_model=NamedItemRead, status_code=201)
def create_role(data: NameCreate, db: Session = Depends(get_db)):
    try:
        return _created(reference_service.create_role(db, data.name), "role")
    except DuplicateNameError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/roles/{role_id}", status_code=204)
def delete_role(role_id: UUID, db: Session = Depends(get_db)):
    _deleted(reference_service.delete_role_by_id(db, role_id), "Role")


@router.delete("/roles", status_code=204)
def delete_role_by_name(name: str, db: Session = Depends(get_db)):
    _deleted(reference_service.delete_role_by_name(db, name), "Role")


# =============================================================================
# Locations
# =============================================================================

@router.get("/locations", response_model=list[NamedItemRead])
def list_locations(db: Session = Depends(get_db)):
    return reference_service.get_locations(db)


@router.post("/locations", response_model=NamedItemRead, status_code=201)
def add_location(data: NameCreate, db: Session = Depends(get_db)):
    try:
        return _created(reference_service.add_location(db, data.name), "location")
    except DuplicateNameError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/locations/{location_id}", status_code=204)
def delete_location(location_id: UUID, db: Session = Depends(get_db)):
    _deleted(reference_service.delete_location(db, location_id), "Location")


# =============================================================================
# Sectors
# =============================================================================

@router.get("/sectors", response_model=list[SectorRead])
def list_sectors(db: Session = Depends(get_db)):
    return reference_service.get_sectors(db)


@router.post("/sectors", response_model=SectorRead, status_code=201)
def add_sector(data: NameCreate, db: Session = Depends(get_db)):
    try:
        return _created(reference_service.add_sector(db, data.name), "sector")
    except DuplicateNameError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.delete("/sectors/{sector_id}", status_code=204)
def delete_sector(sector_id: int, db: Session = Depends(get_db)):
    _deleted(reference_service.delete_sector(db, sector_id), "Sector")
