"""Tests for finance transactions and the finance API."""

from datetime import date
from decimal import Decimal

import pytest

from cockpit.db.models import Organisation
from cockpit.schemas.finance import TransactionCreate
from cockpit.services import finance_service


@pytest.fixture
def org(db):
    organisation = Organisation(name="MB Holding")
    db.add(organisation)
    db.commit()
    return organisation


def test_hash_normalizes_amount_and_description(org):
    first = finance_service.compute_transaction_hash(org.id, date(2025, 1, 5), Decimal("-49.9"), " Rent ")
    second = finance_service.compute_transaction_hash(org.id, date(2025, 1, 5), "-49.90", "Rent")
    other_day = finance_service.compute_transaction_hash(org.id, date(2025, 1, 6), "-49.90", "Rent")

    assert first == second
    assert first != other_day
    assert len(first) == 64


def test_create_is_idempotent(db, org):
    data = TransactionCreate(
        org_id=org.id, booking_date=date(2025, 1, 5), amount=Decimal("-10"), description="Coffee", direction="out"
    )

    first = finance_service.create_transaction(db, data)
    second = finance_service.create_transaction(db, data)

    assert first.id == second.id
    assert len(finance_service.list_transactions(db, org_id=org.id)) == 1


def test_list_filters(db, org):
    for day, amount, direction, category in (
        (date(2025, 1, 1), "-10", "out", "office"),
        (date(2025, 1, 2), "500", "in", "sales"),
        (date(2025, 1, 3), "-20", "out", "travel"),
    ):
        finance_service.create_transaction(
            db,
            TransactionCreate(
                org_id=org.id,
                booking_date=day,
                amount=Decimal(amount),
                description=f"row {day}",
                direction=direction,
                category=category,
            ),
        )

    outgoing = finance_service.list_transactions(db, org_id=org.id, direction="out")
    assert [t.booking_date for t in outgoing] == [date(2025, 1, 3), date(2025, 1, 1)]
    assert [t.category for t in finance_service.list_transactions(db, category="sales")] == ["sales"]
    assert finance_service.list_transactions(db, recurring=True) == []


@pytest.mark.asyncio
async def test_finance_api(authed_client, org):
    payload = {
        "org_id": str(org.id),
        "booking_date": "2025-01-05",
        "amount": "-49.99",
        "description": "Netflix",
        "direction": "out",
    }
    response = await authed_client.post("/api/finance/transactions", json=payload)
    assert response.status_code == 201
    transaction = response.json()
    assert transaction["category"] == "uncategorised"
    assert transaction["is_recurring"] is False

    repeat = await authed_client.post("/api/finance/transactions", json=payload)
    assert repeat.json()["id"] == transaction["id"]

    await authed_client.post(
        "/api/finance/transactions", json={**payload, "booking_date": "2025-02-05"}
    )

    response = await authed_client.patch(
        f"/api/finance/transactions/{transaction['id']}/category", json={"category": "software"}
    )
    assert response.json()["category"] == "software"

    response = await authed_client.post("/api/finance/detect-recurring", json={"orgId": str(org.id)})
    assert response.json() == {"ok": True, "processed": 2, "updated": 1, "errors": 0}

    response = await authed_client.get(
        "/api/finance/transactions", params={"orgId": str(org.id), "recurring": "true"}
    )
    assert [t["booking_date"] for t in response.json()] == ["2025-02-05"]
    assert response.json()[0]["recurrence_pattern"] == "monthly"


@pytest.mark.asyncio
async def test_unknown_transaction_category_is_404(authed_client):
    response = await authed_client.patch(
        "/api/finance/transactions/00000000-0000-0000-0000-000000000000/category",
        json={"category": "x"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_invalid_direction_is_422(authed_client):
    response = await authed_client.get("/api/finance/transactions", params={"direction": "sideways"})
    assert response.status_code == 422
