"""Notes router - the general note and the law notes."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cockpit.core.deps import api_dependencies, get_db
from cockpit.schemas.note import GeneralNoteRead, GeneralNoteSave, LawNoteRead, LawNoteSave
from cockpit.services import note_service

router = APIRouter(dependencies=api_dependencies)


@router.get("/general", response_model=GeneralNoteRead | None)
def get_general_note(db: Session = Depends(get_db)):
    """The general note, or null before the first save."""
    return note_service.get_general_note(db)


@router.put("/general", response_model=GeneralNoteRead)
def save_general_note(data: GeneralNoteSave, db: Session = Depends(get_db)):
    if not note_service.save_general_note(
        db, title=data.title, content=data.content, source=data.source
    ):
        raise HTTPException(status_code=500, detail="Failed to save note")
    return note_service.get_general_note(db)


@router.get("/law", response_model=LawNoteRead | None)
def get_law_note(db: Session = Depends(get_db)):
    return note_service.get_law_note(db)


@router.put("/law", response_model=LawNoteRead)
def save_law_note(data: LawNoteSave, db: Session = Depends(get_db)):
    if not note_service.save_law_note(
        db, title=data.title, content=data.content, document_type=data.document_type
    ):
        raise HTTPException(status_code=500, detail="Failed to save note")
    return note_service.get_law_note(db)


@router.get("/law/by-type", response_model=LawNoteRead | None)
def get_law_note_by_type(contract_type: str, db: Session = Depends(get_db)):
    """Law note for a contract type (main_contract, annex, nda, sow)."""
    return note_service.get_law_note_by_document_type(db, contract_type)
