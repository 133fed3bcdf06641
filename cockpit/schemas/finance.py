"""Pydantic schemas for finance transactions and recurring detection."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cockpit.db.enums import TransactionDirection


class TransactionCreate(BaseModel):
    org_id: UUID
    booking_date: date
    amount: Decimal
    currency: str = Field(default="PLN", min_length=3, max_length=3)
    description: str = Field(..., min_length=1)
    counterparty_name: str | None = Field(default=None, max_length=255)
    direction: TransactionDirection
    category: str = Field(default="uncategorised", max_length=100)
    source_document_id: UUID | None = None

    model_config = {"use_enum_values": True}


class TransactionRead(BaseModel):
    id: UUID
    org_id: UUID
    source_document_id: UUID | None = None
    booking_date: date
    amount: Decimal
    currency: str
    description: str
    counterparty_name: str | None = None
    direction: str
    category: str
    transaction_hash: str
    is_recurring: bool
    recurrence_pattern: str | None = None
    recurrence_group_id: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TransactionCategoryUpdate(BaseModel):
    category: str = Field(..., min_length=1, max_length=100)


class DetectRecurringRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    org_id: UUID | None = None


class DetectRecurringResponse(BaseModel):
    ok: bool = True
    processed: int
    updated: int
    errors: int
