"""Finance transactions (bank statement rows) per organisation."""

from __future__ import annotations

import hashlib
import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cockpit.db.models import FinanceTransaction
from cockpit.schemas.finance import TransactionCreate

logger = logging.getLogger(__name__)


def compute_transaction_hash(
    org_id: UUID | str, booking_date, amount: Decimal | float | str, description: str
) -> str:
    """Stable SHA-256 identity for a statement row."""
    amount_text = f"{Decimal(str(amount)):.2f}"
    base = "|".join([str(org_id), booking_date.isoformat(), amount_text, description.strip()])
    return hashlib.sha256(base.encode("utf-8")).hexdigest()


def get_transaction(db: Session, transaction_id: UUID) -> FinanceTransaction | None:
    return db.query(FinanceTransaction).filter(FinanceTransaction.id == transaction_id).first()


def list_transactions(
    db: Session,
    *,
    org_id: UUID | None = None,
    direction: str | None = None,
    category: str | None = None,
    recurring: bool | None = None,
) -> list[FinanceTransaction]:
    """Transactions newest booking first, optionally filtered."""
    try:
        query = db.query(FinanceTransaction)
        if org_id is not None:
            query = query.filter(FinanceTransaction.org_id == org_id)
        if direction:
            query = query.filter(FinanceTransaction.direction == direction)
        if category:
            query = query.filter(FinanceTransaction.category == category)
        if recurring is not None:
            query = query.filter(FinanceTransaction.is_recurring.is_(recurring))
        return query.order_by(
            FinanceTransaction.booking_date.desc(), FinanceTransaction.created_at.desc()
        ).all()
    except SQLAlchemyError:
        logger.exception("Failed to list transactions")
        return []


def create_transaction(db: Session, data: TransactionCreate) -> FinanceTransaction | None:
    """
    Insert a transaction; importing the same row twice returns the existing one.

    Returns None on database errors.
    """
    tx_hash = compute_transaction_hash(
        data.org_id, data.booking_date, data.amount, data.description
    )
    existing = (
        db.query(FinanceTransaction)
        .filter(
            FinanceTransaction.org_id == data.org_id,
            FinanceTransaction.transaction_hash == tx_hash,
        )
        .first()
    )
    if existing:
        return existing

    transaction = FinanceTransaction(**data.model_dump(), transaction_hash=tx_hash)
    try:
        db.add(transaction)
        db.commit()
        db.refresh(transaction)
        return transaction
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create transaction")
        return None


def update_category(
    db: Session, transaction_id: UUID, category: str
) -> FinanceTransaction | None:
    transaction = get_transaction(db, transaction_id)
    if transaction is None:
        return None
    transaction.category = category
    try:
        db.commit()
        db.refresh(transaction)
        return transaction
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update transaction category")
        return None
