"""create emails table

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op


# revision identifiers, used by Alembic.
revision = "20261019_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "emails",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("to", sa.String(length=1024), nullable=False),
        sa.Column("cc", sa.String(length=1024), nullable=True),
        sa.Column("bcc", sa.String(length=1024), nullable=True),
        sa.Column("subject", sa.String(length=998), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_emails_created_at", "emails", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_emails_created_at", table_name="emails")
    op.drop_table("emails")
