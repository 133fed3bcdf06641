"""
Recurring payment detection.

Each outgoing transaction is compared with the earlier ones of the same
scope. Similar description plus similar amount makes a candidate; the
day intervals to the candidates decide the pattern.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cockpit.db.enums import RecurrencePattern, TransactionDirection
from cockpit.db.models import FinanceTransaction
from cockpit.utils import normalize_description

logger = logging.getLogger(__name__)

MAX_INTERVAL_DAYS = 400
MIN_CONFIDENCE = 0.5
MAX_CONFIDENCE = 0.95
GROUP_ID_MAX_LENGTH = 100


@dataclass(frozen=True)
class DetectionInput:
    id: str
    booking_date: date
    amount: Decimal
    description: str


@dataclass(frozen=True)
class RecurringPatternResult:
    pattern: str
    confidence: float
    group_id: str


def descriptions_similar(first: str, second: str) -> bool:
    norm1 = normalize_description(first)
    norm2 = normalize_description(second)

    if norm1 == norm2:
        return True

    if len(norm1) > 10 and len(norm2) > 10:
        if norm1 in norm2 or norm2 in norm1:
            return True

    if len(norm1) > 20 and len(norm2) > 20:
        words1 = {w for w in norm1.split(" ") if len(w) > 3}
        words2 = {w for w in norm2.split(" ") if len(w) > 3}
        if len(words1 & words2) >= 3:
            return True

    return False


def amounts_similar(first: Decimal | float, second: Decimal | float) -> bool:
    """Equal absolute values, or a difference under 1% of their mean."""
    abs1 = abs(Decimal(str(first)))
    abs2 = abs(Decimal(str(second)))
    if abs1 == abs2:
        return True
    mean = (abs1 + abs2) / 2
    return mean > 0 and abs(abs1 - abs2) / mean < Decimal("0.01")


def pattern_from_interval(days: int) -> str:
    if 360 <= days <= 370:
        return RecurrencePattern.YEARLY.value
    if 88 <= days <= 95:
        return RecurrencePattern.QUARTERLY.value
    if 28 <= days <= 32:
        return RecurrencePattern.MONTHLY.value
    if 6 <= days <= 8:
        return RecurrencePattern.WEEKLY.value
    return RecurrencePattern.ONE_TIME.value


def build_group_id(description: str, amount: Decimal | float) -> str:
    normalized_amount = f"{abs(Decimal(str(amount))):.2f}"
    return f"{normalize_description(description)}_{normalized_amount}"[:GROUP_ID_MAX_LENGTH]


def detect_recurring_pattern(
    transaction: DetectionInput, previous: Iterable[DetectionInput]
) -> RecurringPatternResult:
    similar = [
        t
        for t in previous
        if descriptions_similar(t.description, transaction.description)
        and amounts_similar(t.amount, transaction.amount)
    ]
    if not similar:
        return RecurringPatternResult(RecurrencePattern.ONE_TIME.value, 0.0, transaction.id)

    intervals = []
    for candidate in similar:
        days = abs((transaction.booking_date - candidate.booking_date).days)
        if 0 < days < MAX_INTERVAL_DAYS:
            intervals.append(days)

    if not intervals:
        return RecurringPatternResult(RecurrencePattern.ONE_TIME.value, 0.3, transaction.id)

    # Ties keep the first pattern seen
    pattern, count = Counter(pattern_from_interval(d) for d in intervals).most_common(1)[0]
    confidence = min(MIN_CONFIDENCE + (count / len(similar)) * 0.5, MAX_CONFIDENCE)

    return RecurringPatternResult(
        pattern, confidence, build_group_id(transaction.description, transaction.amount)
    )


def _to_input(tx: FinanceTransaction) -> DetectionInput:
    return DetectionInput(
        id=str(tx.id),
        booking_date=tx.booking_date,
        amount=tx.amount,
        description=tx.description,
    )


def detect_and_update_recurring(db: Session, org_id: UUID | None = None) -> dict[str, int]:
    """
    Re-run detection over outgoing transactions (one org, or all).

    Returns counters: processed, updated, errors.
    """
    try:
        query = db.query(FinanceTransaction).filter(
            FinanceTransaction.direction == TransactionDirection.OUT.value
        )
        if org_id is not None:
            query = query.filter(FinanceTransaction.org_id == org_id)
        transactions = query.order_by(
            FinanceTransaction.booking_date.asc(), FinanceTransaction.created_at.asc()
        ).all()
    except SQLAlchemyError:
        logger.exception("Failed to load transactions for recurring detection")
        return {"processed": 0, "updated": 0, "errors": 1}

    logger.info("Detecting recurring payments", extra={"transaction_count": len(transactions)})

    processed = updated = errors = 0
    history: list[DetectionInput] = []

    for tx in transactions:
        current = _to_input(tx)
        result = detect_recurring_pattern(current, history)
        history.append(current)

        is_recurring = (
            result.pattern != RecurrencePattern.ONE_TIME.value
            and result.confidence > MIN_CONFIDENCE
        )
        if is_recurring:
            needs_update = (
                not tx.is_recurring
                or tx.recurrence_pattern != result.pattern
                or tx.recurrence_group_id != result.group_id
            )
            changes = {
                "is_recurring": True,
                "recurrence_pattern": result.pattern,
                "recurrence_group_id": result.group_id,
            }
        else:
            needs_update = tx.is_recurring
            changes = {
                "is_recurring": False,
                "recurrence_pattern": None,
                "recurrence_group_id": None,
            }

        if needs_update:
            try:
                for field, value in changes.items():
                    setattr(tx, field, value)
                db.commit()
                updated += 1
            except SQLAlchemyError:
                db.rollback()
                logger.exception("Failed to update recurring flags", extra={"transaction_id": current.id})
                errors += 1

        processed += 1

    logger.info(
        "Recurring detection complete",
        extra={"processed": processed, "updated": updated, "errors": errors},
    )
    return {"processed": processed, "updated": updated, "errors": errors}
