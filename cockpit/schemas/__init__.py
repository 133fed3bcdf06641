"""Pydantic schemas for API request/response models."""

from cockpit.schemas.auth import LoginRequest, SessionStatus
from cockpit.schemas.contact import (
    ContactCreate,
    ContactRead,
    ContactTask,
    ContactUpdate,
    TaskCreate,
    TaskUpdate,
)
from cockpit.schemas.document import DocumentCreate, DocumentRead, DocumentUpdate
from cockpit.schemas.email import ContactFile, ContactFilesResponse
from cockpit.schemas.graph import GraphData, GraphLink, GraphNode
from cockpit.schemas.organisation import (
    OrganisationCreate,
    OrganisationRead,
    OrganisationUpdate,
)
from cockpit.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate

__all__ = [
    "LoginRequest",
    "SessionStatus",
    "ContactCreate",
    "ContactRead",
    "ContactTask",
    "ContactUpdate",
    "TaskCreate",
    "TaskUpdate",
    "DocumentCreate",
    "DocumentRead",
    "DocumentUpdate",
    "ContactFile",
    "ContactFilesResponse",
    "GraphData",
    "GraphLink",
    "GraphNode",
    "OrganisationCreate",
    "OrganisationRead",
    "OrganisationUpdate",
    "ProjectCreate",
    "ProjectRead",
    "ProjectUpdate",
]
