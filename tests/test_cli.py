"""Tests for the cockpit CLI."""

from datetime import date
from decimal import Decimal

import pytest
from click.testing import CliRunner

from cockpit import cli as cli_module
from cockpit.db.models import FinanceTransaction, Organisation
from cockpit.services import reference_service


@pytest.fixture
def runner(db, monkeypatch):
    monkeypatch.setattr(cli_module, "SessionLocal", lambda: db)
    return CliRunner()


def test_detect_recurring_reports_counts(runner, db):
    org = Organisation(name="MB Holding")
    db.add(org)
    db.commit()
    for day in (date(2025, 1, 5), date(2025, 2, 5)):
        db.add(
            FinanceTransaction(
                org_id=org.id,
                booking_date=day,
                amount=Decimal("-49.99"),
                description="Netflix",
                direction="out",
                transaction_hash=day.isoformat(),
            )
        )
    db.commit()
    org_id = str(org.id)

    result = runner.invoke(cli_module.cli, ["detect-recurring", "--org-id", org_id])

    assert result.exit_code == 0
    assert "Processed 2, updated 1, errors 0" in result.output


def test_detect_recurring_rejects_bad_org_id(runner):
    result = runner.invoke(cli_module.cli, ["detect-recurring", "--org-id", "not-a-uuid"])
    assert result.exit_code == 2
    assert "must be a UUID" in result.output


def test_detect_recurring_exit_code_on_errors(runner, monkeypatch):
    monkeypatch.setattr(
        cli_module.recurring_service,
        "detect_and_update_recurring",
        lambda db, org_id: {"processed": 0, "updated": 0, "errors": 1},
    )

    result = runner.invoke(cli_module.cli, ["detect-recurring"])

    assert result.exit_code == 1


def test_seed_reference_lists(runner, db):
    result = runner.invoke(cli_module.cli, ["seed-reference-lists"])

    expected = len(reference_service.DEFAULT_CATEGORIES) + len(reference_service.DEFAULT_ROLES)
    assert result.exit_code == 0
    assert f"Added {expected} reference entries" in result.output
    assert reference_service.get_roles(db)
