"""Documents router - CRUD, relation filters, uploads and Google Docs export links."""

from io import BytesIO
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from cockpit.core.deps import api_dependencies, get_db
from cockpit.schemas.document import (
    DocumentCreate,
    DocumentRead,
    DocumentUpdate,
    GoogleDocsExport,
)
from cockpit.services import document_service
from cockpit.services.document_service import DocumentUploadError

router = APIRouter(dependencies=api_dependencies)


@router.get("", response_model=list[DocumentRead])
def list_documents(
    contact_id: UUID | None = None,
    organisation_id: UUID | None = None,
    project_id: UUID | None = None,
    task_id: str | None = None,
    gmail_message_id: str | None = None,
    db: Session = Depends(get_db),
):
    """All documents, newest first, optionally narrowed by relation."""
    return document_service.list_documents(
        db,
        contact_id=contact_id,
        organisation_id=organisation_id,
        project_id=project_id,
        task_id=task_id,
        gmail_message_id=gmail_message_id,
    )


@router.get("/google-docs/export", response_model=GoogleDocsExport)
def google_docs_export(url: str, format: str = "pdf"):
    """Export link for a Google Docs/Sheets/Slides URL (null for other URLs)."""
    if format not in ("pdf", "native"):
        raise HTTPException(status_code=400, detail="format must be 'pdf' or 'native'")
    if not document_service.is_google_docs_url(url):
        return GoogleDocsExport(url=url, export_url=None, is_google_docs=False)
    return GoogleDocsExport(
        url=url,
        export_url=document_service.convert_google_docs_url(url, format),
        is_google_docs=True,
    )


@router.get("/{document_id}", response_model=DocumentRead)
def get_document(document_id: UUID, db: Session = Depends(get_db)):
    document = document_service.get_document(db, document_id)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@router.post("", response_model=DocumentRead, status_code=201)
def create_document(data: DocumentCreate, db: Session = Depends(get_db)):
    document = document_service.create_document(db, data)
    if document is None:
        raise HTTPException(status_code=500, detail="Failed to create document")
    return document


@router.post("/upload", response_model=DocumentRead, status_code=201)
async def upload_document(
    file: Annotated[UploadFile, File()],
    name: Annotated[str | None, Form()] = None,
    document_type: Annotated[str | None, Form()] = None,
    contact_id: Annotated[UUID | None, Form()] = None,
    organisation_id: Annotated[UUID | None, Form()] = None,
    project_id: Annotated[UUID | None, Form()] = None,
    task_id: Annotated[str | None, Form()] = None,
    db: Session = Depends(get_db),
):
    """Store the file in object storage and create its Document."""
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="File is empty")

    fields = {
        "name": name,
        "document_type": document_type,
        "contact_id": contact_id,
        "organisation_id": organisation_id,
        "project_id": project_id,
        "task_id": task_id,
    }
    metadata = DocumentUpdate(**{k: v for k, v in fields.items() if v is not None})

    try:
        document = document_service.upload_document(
            db,
            filename=file.filename or "untitled",
            content_type=file.content_type,
            file=BytesIO(content),
            file_size=len(content),
            metadata=metadata,
        )
    except DocumentUploadError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if document is None:
        raise HTTPException(status_code=500, detail="Failed to create document")
    return document


@router.patch("/{document_id}", response_model=DocumentRead)
def update_document(document_id: UUID, data: DocumentUpdate, db: Session = Depends(get_db)):
    if not document_service.get_document(db, document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    document = document_service.update_document(db, document_id, data)
    if document is None:
        raise HTTPException(status_code=500, detail="Failed to update document")
    return document


@router.delete("/{document_id}", status_code=204)
def delete_document(document_id: UUID, db: Session = Depends(get_db)):
    if not document_service.get_document(db, document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    if not document_service.delete_document(db, document_id):
        raise HTTPException(status_code=500, detail="Failed to delete document")
