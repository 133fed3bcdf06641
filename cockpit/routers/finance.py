"""Finance router - transactions and recurring payment detection."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cockpit.core.deps import api_dependencies, get_db
from cockpit.db.enums import TransactionDirection
from cockpit.schemas.finance import (
    DetectRecurringRequest,
    DetectRecurringResponse,
    TransactionCategoryUpdate,
    TransactionCreate,
    TransactionRead,
)
from cockpit.services import finance_service, recurring_service

router = APIRouter(dependencies=api_dependencies)


@router.get("/transactions", response_model=list[TransactionRead])
def list_transactions(
    org_id: UUID | None = Query(default=None, alias="orgId"),
    direction: TransactionDirection | None = None,
    category: str | None = None,
    recurring: bool | None = None,
    db: Session = Depends(get_db),
):
    return finance_service.list_transactions(
        db,
        org_id=org_id,
        direction=direction.value if direction else None,
        category=category,
        recurring=recurring,
    )


@router.post("/transactions", response_model=TransactionRead, status_code=201)
def create_transaction(data: TransactionCreate, db: Session = Depends(get_db)):
    """Idempotent: the same statement row returns the stored transaction."""
    transaction = finance_service.create_transaction(db, data)
    if transaction is None:
        raise HTTPException(status_code=500, detail="Failed to create transaction")
    return transaction


@router.patch("/transactions/{transaction_id}/category", response_model=TransactionRead)
def update_category(
    transaction_id: UUID, data: TransactionCategoryUpdate, db: Session = Depends(get_db)
):
    if not finance_service.get_transaction(db, transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    transaction = finance_service.update_category(db, transaction_id, data.category)
    if transaction is None:
        raise HTTPException(status_code=500, detail="Failed to update transaction")
    return transaction


@router.post("/detect-recurring", response_model=DetectRecurringResponse)
def detect_recurring(data: DetectRecurringRequest | None = None, db: Session = Depends(get_db)):
    org_id = data.org_id if data else None
    result = recurring_service.detect_and_update_recurring(db, org_id)
    return DetectRecurringResponse(ok=True, **result)
