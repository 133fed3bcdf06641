"""Pydantic schemas for documents."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from cockpit.db.enums import InvoiceType, TaxType


class DocumentFields(BaseModel):
    """Optional document attributes shared by create and update."""

    file_type: str | None = Field(default=None, max_length=50)
    file_size: int | None = Field(default=None, ge=0)
    document_type: str | None = Field(default=None, max_length=100)
    contact_id: UUID | None = None
    organisation_id: UUID | None = None
    project_id: UUID | None = None
    task_id: str | None = Field(default=None, max_length=255)
    notes: str | None = None
    edit_url: str | None = None
    google_docs_url: str | None = None
    full_text: str | None = None
    summary: str | None = None

    invoice_type: InvoiceType | None = None
    tax_type: TaxType | None = None
    amount_original: Decimal | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    amount_base: Decimal | None = None
    base_currency: str | None = Field(default=None, min_length=3, max_length=3)
    invoice_date: date | None = None
    invoice_year: int | None = None
    invoice_month: int | None = Field(default=None, ge=1, le=12)

    source_gmail_message_id: str | None = None
    source_gmail_attachment_id: str | None = None
    contact_email: str | None = None
    contact_name: str | None = None
    organisation_name_guess: str | None = None

    model_config = {"use_enum_values": True}


class DocumentCreate(DocumentFields):
    name: str = Field(..., min_length=1, max_length=500)
    file_url: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Name is required")
        return stripped


class DocumentUpdate(DocumentFields):
    name: str | None = Field(default=None, min_length=1, max_length=500)
    file_url: str | None = None


class DocumentRead(BaseModel):
    id: UUID
    name: str
    file_url: str
    file_type: str | None = None
    file_size: int | None = None
    document_type: str | None = None
    contact_id: UUID | None = None
    organisation_id: UUID | None = None
    project_id: UUID | None = None
    task_id: str | None = None
    notes: str | None = None
    edit_url: str | None = None
    google_docs_url: str | None = None
    full_text: str | None = None
    summary: str | None = None
    invoice_type: str | None = None
    tax_type: str | None = None
    amount_original: Decimal | None = None
    currency: str | None = None
    amount_base: Decimal | None = None
    base_currency: str | None = None
    invoice_date: date | None = None
    invoice_year: int | None = None
    invoice_month: int | None = None
    source_gmail_message_id: str | None = None
    source_gmail_attachment_id: str | None = None
    contact_email: str | None = None
    contact_name: str | None = None
    organisation_name_guess: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class GoogleDocsExport(BaseModel):
    """Export link for a Google Docs/Sheets/Slides URL."""

    url: str
    export_url: str | None
    is_google_docs: bool
