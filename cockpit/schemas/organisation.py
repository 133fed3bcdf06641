"""Pydantic schemas for organisations."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from cockpit.db.enums import OrganisationStatus, Priority


InheritableField = Literal["website", "location", "sector", "categories"]


class OrganisationCreate(BaseModel):
    name: str = Field(..., max_length=255)
    categories: list[str] = Field(default_factory=list)
    status: OrganisationStatus | None = None
    priority: Priority = Priority.MID
    website: str | None = None
    location: str | None = Field(default=None, max_length=255)
    sector: str | None = Field(default=None, max_length=255)
    notes: str | None = None
    avatar: str | None = None

    model_config = {"use_enum_values": True, "validate_default": True}

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Name is required")
        return stripped


class OrganisationUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    categories: list[str] | None = None
    status: OrganisationStatus | None = None
    priority: Priority | None = None
    website: str | None = None
    location: str | None = None
    sector: str | None = None
    notes: str | None = None
    avatar: str | None = None

    model_config = {"use_enum_values": True}

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Name cannot be blank")
        return v.strip() if v is not None else v


class OrganisationRead(BaseModel):
    id: UUID
    name: str
    categories: list[str] = Field(default_factory=list)
    status: str | None = None
    priority: str
    website: str | None = None
    location: str | None = None
    sector: str | None = None
    notes: str | None = None
    notes_updated_at: datetime | None = None
    avatar: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class InheritPropertiesRequest(BaseModel):
    """Fields to copy from the organisation's contacts."""

    fields: list[InheritableField] = Field(..., min_length=1)
