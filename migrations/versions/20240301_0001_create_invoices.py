"""create invoices and invoice_number_counters tables

Revision ID: 20240301_0001
Revises:
Create Date: 2024-03-01 00:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "20240301_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "invoices",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("invoice_number", sa.Integer(), nullable=False),
        sa.Column("month", sa.String(length=32), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column("artifact_id", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invoice_number", name="uq_invoices_invoice_number"),
    )
    op.create_index("ix_invoices_month", "invoices", ["month"], unique=False)

    op.create_table(
        "invoice_number_counters",
        sa.Column("name", sa.String(length=32), nullable=False),
        sa.Column("last_number", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.PrimaryKeyConstraint("name"),
        sa.CheckConstraint("last_number >= 0", name="ck_invoice_counter_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("invoice_number_counters")
    op.drop_index("ix_invoices_month", table_name="invoices")
    op.drop_table("invoices")
