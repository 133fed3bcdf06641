"""General and law notes - singleton rows upserted by fixed id."""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cockpit.db.models import GeneralNote, LawNote

logger = logging.getLogger(__name__)

GENERAL_NOTE_ID = "general-main-note"
LAW_NOTE_ID = "law-main-note"

# Contract document type -> law note document_type
CONTRACT_TYPE_TO_LAW_NOTE = {
    "main_contract": "Contract",
    "annex": "Agreement",
    "nda": "NDA",
    "sow": "Contract",
}
DEFAULT_LAW_NOTE_TYPE = "Contract"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# General note
# =============================================================================

def get_general_note(db: Session) -> GeneralNote | None:
    try:
        return db.query(GeneralNote).filter(GeneralNote.id == GENERAL_NOTE_ID).first()
    except SQLAlchemyError:
        logger.exception("Failed to load general note")
        return None


def save_general_note(
    db: Session, *, title: str | None, content: str, source: str | None
) -> bool:
    """Upsert the general note. `created_at` survives later saves."""
    now = _now_utc()
    note = get_general_note(db)
    if note is None:
        note = GeneralNote(id=GENERAL_NOTE_ID, created_at=now)
        db.add(note)
    note.title = title or ""
    note.content = content
    note.source = source or ""
    note.updated_at = now
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to save general note")
        return False
    return True


# =============================================================================
# Law note
# =============================================================================

def get_law_note(db: Session) -> LawNote | None:
    try:
        return db.query(LawNote).filter(LawNote.id == LAW_NOTE_ID).first()
    except SQLAlchemyError:
        logger.exception("Failed to load law note")
        return None


def save_law_note(
    db: Session, *, title: str | None, content: str, document_type: str | None
) -> bool:
    now = _now_utc()
    note = get_law_note(db)
    if note is None:
        note = LawNote(id=LAW_NOTE_ID, created_at=now)
        db.add(note)
    note.title = title or ""
    note.content = content
    note.document_type = document_type or ""
    note.updated_at = now
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to save law note")
        return False
    return True


def get_law_note_by_document_type(db: Session, contract_type: str) -> LawNote | None:
    """Most recently updated law note for a contract type, else the main law note."""
    law_type = CONTRACT_TYPE_TO_LAW_NOTE.get(contract_type, DEFAULT_LAW_NOTE_TYPE)
    try:
        note = (
            db.query(LawNote)
            .filter(LawNote.document_type == law_type)
            .order_by(LawNote.updated_at.desc())
            .first()
        )
    except SQLAlchemyError:
        logger.exception("Failed to load law note by document type")
        return None
    if note is None:
        return get_law_note(db)
    return note
