"""Pydantic schemas for projects.

Projects are stored with a `title`; `name` is accepted as an alias on input
and always mirrored on output.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from cockpit.db.enums import Priority, ProjectType


class ProjectCreate(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    status: str = Field(default="ongoing", max_length=50)
    project_type: ProjectType = ProjectType.MB_20
    priority: Priority | None = None
    organisation_ids: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)

    model_config = {"use_enum_values": True, "validate_default": True}

    @model_validator(mode="after")
    def require_title_or_name(self) -> "ProjectCreate":
        title = (self.name or self.title or "").strip()
        if not title:
            raise ValueError("Project title is required")
        self.title = title
        self.name = title
        return self


class ProjectUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    status: str | None = Field(default=None, max_length=50)
    project_type: ProjectType | None = None
    priority: Priority | None = None
    organisation_ids: list[str] | None = None
    categories: list[str] | None = None

    model_config = {"use_enum_values": True}


class ProjectRead(BaseModel):
    id: UUID
    title: str
    name: str
    description: str | None = None
    status: str
    project_type: str
    priority: str | None = None
    organisation_ids: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
