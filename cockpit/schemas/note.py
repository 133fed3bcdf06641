"""Pydantic schemas for the general and law notes."""

from datetime import datetime

from pydantic import BaseModel, Field


class GeneralNoteSave(BaseModel):
    title: str = Field(default="", max_length=500)
    content: str = ""
    source: str = ""


class GeneralNoteRead(BaseModel):
    id: str
    title: str
    content: str
    source: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LawNoteSave(BaseModel):
    title: str = Field(default="", max_length=500)
    content: str = ""
    document_type: str = Field(default="", max_length=100)


class LawNoteRead(BaseModel):
    id: str
    title: str
    content: str
    document_type: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
