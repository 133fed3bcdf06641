"""Baseline migration - cockpit entities, reference lists, finance and integrations

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Portable across SQLite (local) and PostgreSQL: JSON columns become JSONB on
PostgreSQL, UUIDs use the generic Uuid type.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade() -> None:
    """Create all cockpit tables."""

    # ==========================================================================
    # Core entities
    # ==========================================================================
    op.create_table(
        'contacts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(320)),
        sa.Column('avatar', sa.Text()),
        sa.Column('organization', sa.String(255)),
        sa.Column('organizations', _json(), nullable=False),
        sa.Column('projects', _json(), nullable=False),
        sa.Column('notes', sa.Text()),
        sa.Column('categories', _json(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('contact_status', sa.String(20)),
        sa.Column('role', sa.String(255)),
        sa.Column('sector', sa.String(255)),
        sa.Column('location', sa.String(255)),
        sa.Column('nationality', sa.String(255)),
        sa.Column('website', sa.Text()),
        sa.Column('tasks', _json(), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('idx_contacts_name_org', 'contacts', ['name', 'organization'])

    op.create_table(
        'organisations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('categories', _json(), nullable=False),
        sa.Column('status', sa.String(30)),
        sa.Column('priority', sa.String(20), nullable=False),
        sa.Column('website', sa.Text()),
        sa.Column('location', sa.String(255)),
        sa.Column('sector', sa.String(255)),
        sa.Column('notes', sa.Text()),
        _timestamp('notes_updated_at', nullable=True),
        sa.Column('avatar', sa.Text()),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )

    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('project_type', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(20)),
        sa.Column('organisation_ids', _json(), nullable=False),
        sa.Column('categories', _json(), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )

    op.create_table(
        'documents',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(500), nullable=False),
        sa.Column('file_url', sa.Text(), nullable=False),
        sa.Column('file_type', sa.String(50)),
        sa.Column('file_size', sa.Integer()),
        sa.Column('document_type', sa.String(100)),
        sa.Column('contact_id', sa.Uuid(), sa.ForeignKey('contacts.id', ondelete='SET NULL')),
        sa.Column('organisation_id', sa.Uuid(), sa.ForeignKey('organisations.id', ondelete='SET NULL')),
        sa.Column('project_id', sa.Uuid(), sa.ForeignKey('projects.id', ondelete='SET NULL')),
        sa.Column('task_id', sa.String(255)),
        sa.Column('notes', sa.Text()),
        sa.Column('edit_url', sa.Text()),
        sa.Column('google_docs_url', sa.Text()),
        sa.Column('full_text', sa.Text()),
        sa.Column('summary', sa.Text()),
        sa.Column('invoice_type', sa.String(20)),
        sa.Column('tax_type', sa.String(10)),
        sa.Column('amount_original', sa.Numeric(14, 2)),
        sa.Column('currency', sa.String(3)),
        sa.Column('amount_base', sa.Numeric(14, 2)),
        sa.Column('base_currency', sa.String(3)),
        sa.Column('invoice_date', sa.Date()),
        sa.Column('invoice_year', sa.Integer()),
        sa.Column('invoice_month', sa.Integer()),
        sa.Column('source_gmail_message_id', sa.String(255)),
        sa.Column('source_gmail_attachment_id', sa.Text()),
        sa.Column('contact_email', sa.String(320)),
        sa.Column('contact_name', sa.String(255)),
        sa.Column('organisation_name_guess', sa.String(255)),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('idx_documents_contact', 'documents', ['contact_id'])
    op.create_index('idx_documents_organisation', 'documents', ['organisation_id'])
    op.create_index('idx_documents_project', 'documents', ['project_id'])
    op.create_index('idx_documents_gmail_message', 'documents', ['source_gmail_message_id'])

    # ==========================================================================
    # Reference lists
    # ==========================================================================
    for table in ('categories', 'roles', 'locations'):
        op.create_table(
            table,
            sa.Column('id', sa.Uuid(), primary_key=True),
            sa.Column('name', sa.String(255), nullable=False, unique=True),
            _timestamp('created_at'),
        )

    op.create_table(
        'sectors',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False, unique=True),
        _timestamp('created_at'),
    )

    # ==========================================================================
    # Notes
    # ==========================================================================
    op.create_table(
        'general_notes',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('source', sa.Text(), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_table(
        'law_notes',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('document_type', sa.String(100), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )

    # ==========================================================================
    # Finance
    # ==========================================================================
    op.create_table(
        'finance_transactions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('org_id', sa.Uuid(), sa.ForeignKey('organisations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('source_document_id', sa.Uuid(), sa.ForeignKey('documents.id', ondelete='SET NULL')),
        sa.Column('booking_date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('counterparty_name', sa.String(255)),
        sa.Column('direction', sa.String(3), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('transaction_hash', sa.String(64), nullable=False),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('recurrence_pattern', sa.String(20)),
        sa.Column('recurrence_group_id', sa.String(100)),
        _timestamp('created_at'),
        sa.UniqueConstraint('org_id', 'transaction_hash', name='uq_finance_transactions_org_hash'),
    )
    op.create_index(
        'idx_finance_transactions_org_date', 'finance_transactions', ['org_id', 'booking_date']
    )

    # ==========================================================================
    # Integrations (tokens are Fernet-encrypted text)
    # ==========================================================================
    op.create_table(
        'gmail_credentials',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_email', sa.String(320), nullable=False, unique=True),
        sa.Column('access_token', sa.Text(), nullable=False),
        sa.Column('refresh_token', sa.Text()),
        _timestamp('expiry_date', nullable=True),
        _timestamp('updated_at'),
    )

    op.create_table(
        'notion_connections',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_email', sa.String(320), nullable=False),
        sa.Column('access_token', sa.Text(), nullable=False),
        sa.Column('workspace_id', sa.String(64)),
        sa.Column('workspace_name', sa.String(255)),
        sa.Column('bot_id', sa.String(64)),
        sa.Column('notion_parent_id', sa.String(64)),
        sa.Column('notion_parent_type', sa.String(20)),
        _timestamp('created_at'),
    )
    op.create_index('ix_notion_connections_user_email', 'notion_connections', ['user_email'])

    op.create_table(
        'notion_links',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_email', sa.String(320), nullable=False),
        sa.Column('mb_entity_type', sa.String(20), nullable=False),
        sa.Column('mb_entity_id', sa.String(64), nullable=False),
        sa.Column('notion_page_id', sa.String(64), nullable=False),
        sa.Column('notion_url', sa.Text()),
        sa.Column('notion_parent_type', sa.String(20)),
        sa.Column('notion_parent_id', sa.String(64)),
        _timestamp('created_at'),
    )
    op.create_index('idx_notion_links_entity', 'notion_links', ['mb_entity_type', 'mb_entity_id'])


def downgrade() -> None:
    """Drop all cockpit tables."""
    for table in (
        'notion_links',
        'notion_connections',
        'gmail_credentials',
        'finance_transactions',
        'law_notes',
        'general_notes',
        'sectors',
        'locations',
        'roles',
        'categories',
        'documents',
        'projects',
        'organisations',
        'contacts',
    ):
        op.drop_table(table)
