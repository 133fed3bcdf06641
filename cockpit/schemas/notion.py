"""Pydantic schemas for the Notion integration."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cockpit.db.enums import NotionParentType


class CreateNoteRequest(BaseModel):
    """Body of POST /api/notion/create-note (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_email: str | None = None
    mb_entity_type: str | None = None
    mb_entity_id: str | None = None


class CreateNoteResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool = True
    notion_page_id: str
    notion_url: str | None = None


class NotionAuthUrl(BaseModel):
    auth_url: str


class NotionLinkRead(BaseModel):
    id: UUID
    mb_entity_type: str
    mb_entity_id: str
    notion_page_id: str
    notion_url: str | None = None
    notion_parent_type: str | None = None
    notion_parent_id: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class NotionConnectionStatus(BaseModel):
    connected: bool
    workspace_name: str | None = None
    parent_id: str | None = None
    parent_type: str | None = None


class NotionParentUpdate(BaseModel):
    """Choose the database (or data source) new notes are created in."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )

    user_email: str = Field(..., min_length=3, max_length=320)
    parent_id: str = Field(..., min_length=1, max_length=64)
    parent_type: NotionParentType = NotionParentType.DATABASE
