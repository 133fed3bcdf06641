"""Organisations router."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cockpit.core.deps import api_dependencies, get_db
from cockpit.schemas.contact import ContactRead
from cockpit.schemas.organisation import (
    InheritPropertiesRequest,
    OrganisationCreate,
    OrganisationRead,
    OrganisationUpdate,
)
from cockpit.services import organisation_service

router = APIRouter(dependencies=api_dependencies)


def _get_or_404(db: Session, org_id: UUID):
    org = organisation_service.get_organisation(db, org_id)
    if not org:
        raise HTTPException(status_code=404, detail="Organisation not found")
    return org


@router.get("", response_model=list[OrganisationRead])
def list_organisations(db: Session = Depends(get_db)):
    return organisation_service.get_organisations(db)


@router.get("/{org_id}", response_model=OrganisationRead)
def get_organisation(org_id: UUID, db: Session = Depends(get_db)):
    return _get_or_404(db, org_id)


@router.post("", response_model=OrganisationRead, status_code=201)
def create_organisation(data: OrganisationCreate, db: Session = Depends(get_db)):
    if organisation_service.get_organisation_by_name(db, data.name):
        raise HTTPException(status_code=409, detail=f"Organisation '{data.name}' already exists")
    org = organisation_service.create_organisation(db, data)
    if org is None:
        raise HTTPException(status_code=500, detail="Failed to create organisation")
    return org


@router.patch("/{org_id}", response_model=OrganisationRead)
def update_organisation(org_id: UUID, data: OrganisationUpdate, db: Session = Depends(get_db)):
    _get_or_404(db, org_id)
    if data.name is not None:
        existing = organisation_service.get_organisation_by_name(db, data.name)
        if existing and existing.id != org_id:
            raise HTTPException(status_code=409, detail=f"Organisation '{data.name}' already exists")
    org = organisation_service.update_organisation(db, org_id, data)
    if org is None:
        raise HTTPException(status_code=500, detail="Failed to update organisation")
    return org


@router.delete("/{org_id}", status_code=204)
def delete_organisation(org_id: UUID, db: Session = Depends(get_db)):
    _get_or_404(db, org_id)
    if not organisation_service.delete_organisation(db, org_id):
        raise HTTPException(status_code=500, detail="Failed to delete organisation")


@router.get("/{org_id}/contacts", response_model=list[ContactRead])
def list_organisation_contacts(org_id: UUID, db: Session = Depends(get_db)):
    """Contacts linked by the legacy organisation field or the organisations list."""
    org = _get_or_404(db, org_id)
    return organisation_service.get_contacts_for_organisation(db, org.name)


@router.post("/{org_id}/inherit", response_model=OrganisationRead)
def inherit_properties(
    org_id: UUID, data: InheritPropertiesRequest, db: Session = Depends(get_db)
):
    """Copy website/location/sector/categories from the organisation's contacts."""
    org = _get_or_404(db, org_id)
    updated = organisation_service.inherit_properties_from_contacts(db, org_id, data.fields)
    # Nothing to inherit: return the organisation unchanged
    return updated or org
