"""Pydantic schemas for contacts and their embedded tasks."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from cockpit.db.enums import ContactStatus, Priority, TaskStatus
from cockpit.utils.normalization import normalize_email


# =============================================================================
# Embedded tasks
# =============================================================================

class ContactTask(BaseModel):
    """A task stored inside a contact's `tasks` list."""

    id: str
    text: str
    completed: bool = False
    status: TaskStatus | None = None
    priority: Priority | None = None
    due_date: str | None = None
    notes: str | None = None
    assignees: list[str] = Field(default_factory=list)
    created_at: str | None = None

    model_config = {"use_enum_values": True}


class TaskCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)
    completed: bool = False
    status: TaskStatus | None = TaskStatus.ONGOING
    priority: Priority | None = None
    due_date: str | None = None
    notes: str | None = None
    assignees: list[str] = Field(default_factory=list)

    model_config = {"use_enum_values": True, "validate_default": True}


class TaskUpdate(BaseModel):
    text: str | None = Field(default=None, min_length=1, max_length=2000)
    completed: bool | None = None
    status: TaskStatus | None = None
    priority: Priority | None = None
    due_date: str | None = None
    notes: str | None = None
    assignees: list[str] | None = None

    model_config = {"use_enum_values": True}


# =============================================================================
# Contacts
# =============================================================================

class ContactBase(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    avatar: str | None = None
    organization: str | None = Field(default=None, max_length=255)
    organizations: list[str] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)
    notes: str | None = None
    categories: list[str] = Field(default_factory=list)
    status: Priority = Priority.MID
    contact_status: ContactStatus | None = None
    role: str | None = Field(default=None, max_length=255)
    sector: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    nationality: str | None = Field(default=None, max_length=255)
    website: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email_field(cls, v: str | None) -> str | None:
        return normalize_email(v)

    @field_validator("organization")
    @classmethod
    def blank_organization_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class ContactCreate(ContactBase):
    """Request to create a contact. Name must not be blank."""

    name: str = Field(..., max_length=255)
    tasks: list[ContactTask] = Field(default_factory=list)

    model_config = {"use_enum_values": True, "validate_default": True}

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Name is required")
        return stripped


class ContactUpdate(BaseModel):
    """Partial update. Only fields that are set are written."""

    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    avatar: str | None = None
    organization: str | None = Field(default=None, max_length=255)
    organizations: list[str] | None = None
    projects: list[str] | None = None
    notes: str | None = None
    categories: list[str] | None = None
    status: Priority | None = None
    contact_status: ContactStatus | None = None
    role: str | None = None
    sector: str | None = None
    location: str | None = None
    nationality: str | None = None
    website: str | None = None
    tasks: list[ContactTask] | None = None

    model_config = {"use_enum_values": True}

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Name cannot be blank")
        return v.strip() if v is not None else v

    @field_validator("email")
    @classmethod
    def normalize_email_field(cls, v: str | None) -> str | None:
        return normalize_email(v)


class ContactRead(BaseModel):
    id: UUID
    name: str
    email: str | None = None
    avatar: str | None = None
    organization: str | None = None
    organizations: list[str] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)
    notes: str | None = None
    categories: list[str] = Field(default_factory=list)
    status: str
    contact_status: str | None = None
    role: str | None = None
    sector: str | None = None
    location: str | None = None
    nationality: str | None = None
    website: str | None = None
    tasks: list[ContactTask] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
