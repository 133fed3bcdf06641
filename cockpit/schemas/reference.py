"""Pydantic schemas for reference lists (categories, roles, locations, sectors)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class NameCreate(BaseModel):
    """Request body for adding a named reference entry."""

    name: str = Field(..., max_length=255)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Name is required")
        return stripped


class NamedItemRead(BaseModel):
    """Category, role or location row."""

    id: UUID
    name: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class SectorRead(BaseModel):
    id: int
    name: str
    slug: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
