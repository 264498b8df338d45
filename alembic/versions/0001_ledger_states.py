"""ledger state storage

Revision ID: 0001_ledger_states
Revises:
Create Date: 2026-03-14
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_ledger_states"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "ledger_states",
        sa.Column("key", sa.String(length=100), primary_key=True),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("ledger_states")
