"""Document service - CRUD, relation filters and upload."""

import logging
import re
from typing import BinaryIO
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cockpit.db.models import Document
from cockpit.schemas.document import DocumentCreate, DocumentUpdate
from cockpit.services import storage_service

logger = logging.getLogger(__name__)


class DocumentUploadError(Exception):
    """Raised when the file could not be stored."""


GOOGLE_DOCS_PATTERN = re.compile(r"docs\.google\.com/(document|spreadsheets|presentation)/d/")
_GOOGLE_ID = r"/{kind}/d/([a-zA-Z0-9_-]+)"


# =============================================================================
# Reads
# =============================================================================

def _list(db: Session, *criteria) -> list[Document]:
    try:
        return (
            db.query(Document)
            .filter(*criteria)
            .order_by(Document.created_at.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Failed to load documents")
        return []


def get_documents(db: Session) -> list[Document]:
    """All documents, newest first."""
    return _list(db)


def get_document(db: Session, document_id: UUID) -> Document | None:
    return db.query(Document).filter(Document.id == document_id).first()


def get_documents_by_contact(db: Session, contact_id: UUID) -> list[Document]:
    return _list(db, Document.contact_id == contact_id)


def get_documents_by_organisation(db: Session, organisation_id: UUID) -> list[Document]:
    return _list(db, Document.organisation_id == organisation_id)


def get_documents_by_project(db: Session, project_id: UUID) -> list[Document]:
    return _list(db, Document.project_id == project_id)


def get_documents_by_task(db: Session, task_id: str) -> list[Document]:
    return _list(db, Document.task_id == task_id)


def get_documents_by_gmail_message(db: Session, message_id: str) -> list[Document]:
    return _list(db, Document.source_gmail_message_id == message_id)


def list_documents(
    db: Session,
    *,
    contact_id: UUID | None = None,
    organisation_id: UUID | None = None,
    project_id: UUID | None = None,
    task_id: str | None = None,
    gmail_message_id: str | None = None,
) -> list[Document]:
    """List documents with any combination of relation filters."""
    criteria = []
    if contact_id:
        criteria.append(Document.contact_id == contact_id)
    if organisation_id:
        criteria.append(Document.organisation_id == organisation_id)
    if project_id:
        criteria.append(Document.project_id == project_id)
    if task_id:
        criteria.append(Document.task_id == task_id)
    if gmail_message_id:
        criteria.append(Document.source_gmail_message_id == gmail_message_id)
    return _list(db, *criteria)


# =============================================================================
# Writes
# =============================================================================

def create_document(db: Session, data: DocumentCreate) -> Document | None:
    document = Document(**data.model_dump())
    try:
        db.add(document)
        db.commit()
        db.refresh(document)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create document")
        return None
    return document


def update_document(db: Session, document_id: UUID, data: DocumentUpdate) -> Document | None:
    document = get_document(db, document_id)
    if not document:
        return None
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(document, field, value)
    try:
        db.commit()
        db.refresh(document)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update document", extra={"entity_id": str(document_id)})
        return None
    return document


def delete_document(db: Session, document_id: UUID) -> bool:
    document = get_document(db, document_id)
    if not document:
        return False
    try:
        db.delete(document)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete document", extra={"entity_id": str(document_id)})
        return False
    return True


def upload_document(
    db: Session,
    *,
    filename: str,
    content_type: str | None,
    file: BinaryIO,
    file_size: int | None,
    metadata: DocumentUpdate | None = None,
) -> Document | None:
    """
    Store the file and create a Document pointing at its public URL.

    Raises:
        DocumentUploadError: storage backend rejected the file
    """
    result = storage_service.upload_file(filename, content_type, file, folder="documents")
    if result.error:
        raise DocumentUploadError(result.error)

    fields = metadata.model_dump(exclude_unset=True) if metadata else {}
    fields.pop("file_url", None)
    fields.setdefault("name", filename)
    fields["file_type"] = storage_service.get_file_type(filename, content_type)
    if file_size is not None:
        fields["file_size"] = file_size

    return create_document(db, DocumentCreate(file_url=result.url, **fields))


# =============================================================================
# Google Docs helpers
# =============================================================================

def is_google_docs_url(url: str) -> bool:
    return bool(GOOGLE_DOCS_PATTERN.search(url or ""))


def convert_google_docs_url(url: str, export_format: str = "pdf") -> str:
    """
    Export URL for a Google Docs/Sheets/Slides link.

    `export_format` is "pdf" or the native Office format (docx/xlsx/pptx).
    Anything that is not a Google Docs link is returned unchanged.
    """
    as_pdf = export_format == "pdf"

    match = re.search(_GOOGLE_ID.format(kind="document"), url)
    if match:
        fmt = "pdf" if as_pdf else "docx"
        return f"https://docs.google.com/document/d/{match.group(1)}/export?format={fmt}"

    match = re.search(_GOOGLE_ID.format(kind="spreadsheets"), url)
    if match:
        fmt = "pdf" if as_pdf else "xlsx"
        return f"https://docs.google.com/spreadsheets/d/{match.group(1)}/export?format={fmt}"

    match = re.search(_GOOGLE_ID.format(kind="presentation"), url)
    if match:
        fmt = "pdf" if as_pdf else "pptx"
        return f"https://docs.google.com/presentation/d/{match.group(1)}/export/{fmt}"

    return url
