"""CLI tools for cockpit administration."""

from uuid import UUID

import click

from cockpit.db.base import Base
from cockpit.db.session import SessionLocal, engine
from cockpit.services import recurring_service, reference_service


@click.group()
def cli():
    """Cockpit CLI tools."""
    pass


@cli.command()
@click.option("--org-id", default=None, help="Only this organisation (UUID); default all")
def detect_recurring(org_id: str | None):
    """
    Re-run recurring payment detection over outgoing transactions.

    Example:
        python -m cockpit.cli detect-recurring --org-id 6f1c...
    """
    try:
        org_uuid = UUID(org_id) if org_id else None
    except ValueError:
        raise click.BadParameter("must be a UUID", param_hint="--org-id")

    db = SessionLocal()
    try:
        result = recurring_service.detect_and_update_recurring(db, org_uuid)
    finally:
        db.close()

    click.echo(
        f"Processed {result['processed']}, updated {result['updated']}, errors {result['errors']}"
    )
    if result["errors"]:
        raise SystemExit(1)


@cli.command()
def seed_reference_lists():
    """Insert default categories and roles that are missing."""
    db = SessionLocal()
    try:
        added = reference_service.seed_reference_lists(db)
    finally:
        db.close()
    click.echo(f"Added {added} reference entries")


@cli.command()
def create_tables():
    """Create all tables (local SQLite setups; use Alembic elsewhere)."""
    import cockpit.db.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    click.echo("Tables created")


if __name__ == "__main__":
    cli()
