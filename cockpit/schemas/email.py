"""Pydantic schemas for Gmail attachments and the Google connection."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContactFile(BaseModel):
    """An email attachment exchanged with a contact."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    email_message_id: str
    attachment_id: str
    part_id: str
    file_name: str
    mime_type: str
    size: int = 0
    direction: Literal["sent", "received"]
    email_subject: str = ""
    email_date: str = ""
    email_from: str = ""
    email_to: list[str] = Field(default_factory=list)


class ContactFilesResponse(BaseModel):
    files: list[ContactFile] = Field(default_factory=list)


class GmailAuthUrl(BaseModel):
    auth_url: str


class GmailConnectionStatus(BaseModel):
    connected: bool


class GmailDisconnectRequest(BaseModel):
    user_email: str = Field(..., min_length=3, max_length=320)
