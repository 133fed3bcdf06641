"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from cockpit.db.base import Base
from cockpit.db.enums import Priority, ProjectType
from cockpit.db.types import EncryptedString, JsonType, StringList


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_now_utc, onupdate=_now_utc, nullable=False
    )


# =============================================================================
# Core entities
# =============================================================================

class Contact(TimestampMixin, Base):
    """
    A person in the cockpit.

    Organisation membership is stored by organisation *name*: the legacy
    `organization` column plus the `organizations` list. Tasks are embedded
    as a JSON list of dicts.
    """

    __tablename__ = "contacts"
    __table_args__ = (
        Index("idx_contacts_name_org", "name", "organization"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    organization: Mapped[str | None] = mapped_column(String(255), nullable=True)
    organizations: Mapped[list[str]] = mapped_column(StringList, default=list, nullable=False)
    projects: Mapped[list[str]] = mapped_column(StringList, default=list, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    categories: Mapped[list[str]] = mapped_column(StringList, default=list, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=Priority.MID.value, nullable=False
    )
    contact_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    role: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sector: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(Text, nullable=True)
    tasks: Mapped[list[dict]] = mapped_column(JsonType, default=list, nullable=False)


class Organisation(TimestampMixin, Base):
    __tablename__ = "organisations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    categories: Mapped[list[str]] = mapped_column(StringList, default=list, nullable=False)
    status: Mapped[str | None] = mapped_column(String(30), nullable=True)
    priority: Mapped[str] = mapped_column(
        String(20), default=Priority.MID.value, nullable=False
    )
    website: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sector: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes_updated_at: Mapped[datetime | None] = mapped_column(nullable=True)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)


class Project(TimestampMixin, Base):
    """Project record. The column is `title`; the API also exposes it as `name`."""

    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), default="ongoing", nullable=False)
    project_type: Mapped[str] = mapped_column(
        String(20), default=ProjectType.MB_20.value, nullable=False
    )
    priority: Mapped[str | None] = mapped_column(String(20), nullable=True)
    organisation_ids: Mapped[list[str]] = mapped_column(StringList, default=list, nullable=False)
    categories: Mapped[list[str]] = mapped_column(StringList, default=list, nullable=False)


class Document(TimestampMixin, Base):
    __tablename__ = "documents"
    __table_args__ = (
        Index("idx_documents_contact", "contact_id"),
        Index("idx_documents_organisation", "organisation_id"),
        Index("idx_documents_project", "project_id"),
        Index("idx_documents_gmail_message", "source_gmail_message_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    file_url: Mapped[str] = mapped_column(Text, nullable=False)
    file_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    document_type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    contact_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("contacts.id", ondelete="SET NULL"), nullable=True
    )
    organisation_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("organisations.id", ondelete="SET NULL"), nullable=True
    )
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True
    )
    # "<contact_id>-<task_id>"
    task_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    edit_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    google_docs_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    full_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Invoice metadata
    invoice_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    tax_type: Mapped[str | None] = mapped_column(String(10), nullable=True)
    amount_original: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    currency: Mapped[str | None] = mapped_column(String(3), nullable=True)
    amount_base: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    base_currency: Mapped[str | None] = mapped_column(String(3), nullable=True)
    invoice_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    invoice_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    invoice_month: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Gmail provenance
    source_gmail_message_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    source_gmail_attachment_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    organisation_name_guess: Mapped[str | None] = mapped_column(String(255), nullable=True)


# =============================================================================
# Reference lists
# =============================================================================

class Category(Base):
    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)


class Sector(Base):
    __tablename__ = "sectors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)


# =============================================================================
# Notes (singleton rows keyed by a fixed id)
# =============================================================================

class GeneralNote(Base):
    __tablename__ = "general_notes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(Text, default="", nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    source: Mapped[str] = mapped_column(Text, default="", nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)


class LawNote(Base):
    __tablename__ = "law_notes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(Text, default="", nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    document_type: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)


# =============================================================================
# Finance
# =============================================================================

class FinanceTransaction(Base):
    """Bank statement line. `transaction_hash` makes imports idempotent per org."""

    __tablename__ = "finance_transactions"
    __table_args__ = (
        UniqueConstraint("org_id", "transaction_hash", name="uq_finance_transactions_org_hash"),
        Index("idx_finance_transactions_org_date", "org_id", "booking_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organisations.id", ondelete="CASCADE"), nullable=False
    )
    source_document_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("documents.id", ondelete="SET NULL"), nullable=True
    )
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="PLN", nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    counterparty_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    direction: Mapped[str] = mapped_column(String(3), nullable=False)
    category: Mapped[str] = mapped_column(String(100), default="uncategorised", nullable=False)
    transaction_hash: Mapped[str] = mapped_column(String(64), nullable=False)

    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    recurrence_pattern: Mapped[str | None] = mapped_column(String(20), nullable=True)
    recurrence_group_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)


# =============================================================================
# Integrations
# =============================================================================

class GoogleCredential(Base):
    """Per-user Google OAuth tokens (Gmail + Calendar), encrypted at rest."""

    __tablename__ = "gmail_credentials"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    access_token: Mapped[str] = mapped_column(EncryptedString, nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(EncryptedString, nullable=True)
    expiry_date: Mapped[datetime | None] = mapped_column(nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        default=_now_utc, onupdate=_now_utc, nullable=False
    )


class NotionConnection(Base):
    __tablename__ = "notion_connections"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    access_token: Mapped[str] = mapped_column(EncryptedString, nullable=False)
    workspace_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    workspace_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bot_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    notion_parent_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    notion_parent_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)


class NotionLink(Base):
    """Back-pointer from a cockpit entity to a Notion page."""

    __tablename__ = "notion_links"
    __table_args__ = (
        Index("idx_notion_links_entity", "mb_entity_type", "mb_entity_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_email: Mapped[str] = mapped_column(String(320), nullable=False)
    mb_entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    mb_entity_id: Mapped[str] = mapped_column(String(64), nullable=False)
    notion_page_id: Mapped[str] = mapped_column(String(64), nullable=False)
    notion_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    notion_parent_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    notion_parent_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=_now_utc, nullable=False)


__all__ = [
    "Category",
    "Contact",
    "Document",
    "FinanceTransaction",
    "GeneralNote",
    "GoogleCredential",
    "LawNote",
    "Location",
    "NotionConnection",
    "NotionLink",
    "Organisation",
    "Project",
    "Role",
    "Sector",
]
