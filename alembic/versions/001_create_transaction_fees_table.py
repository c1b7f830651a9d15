"""create transaction_fees table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers, used by Alembic
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "transaction_fees",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("payment_method", sa.String(50), nullable=False),
        sa.Column("payment_type", sa.String(50), nullable=True),
        sa.Column(
            "transfer_fee_percentage",
            sa.Numeric(precision=8, scale=4),
            server_default="0",
            nullable=False,
        ),
        sa.Column(
            "withdrawal_fee_percentage",
            sa.Numeric(precision=8, scale=4),
            server_default="0",
            nullable=False,
        ),
        sa.Column(
            "fee_fixed",
            sa.Numeric(precision=10, scale=2),
            server_default="0",
            nullable=False,
        ),
        sa.Column("fee_cap", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint(
            "transfer_fee_percentage >= 0 AND transfer_fee_percentage <= 100",
            name="ck_transaction_fees_transfer_pct",
        ),
        sa.CheckConstraint(
            "withdrawal_fee_percentage >= 0 AND withdrawal_fee_percentage <= 100",
            name="ck_transaction_fees_withdrawal_pct",
        ),
        sa.CheckConstraint("fee_fixed >= 0", name="ck_transaction_fees_fee_fixed"),
        sa.CheckConstraint(
            "fee_cap IS NULL OR fee_cap >= fee_fixed",
            name="ck_transaction_fees_fee_cap",
        ),
    )
    op.create_index(
        "ix_transaction_fees_payment_method", "transaction_fees", ["payment_method"]
    )
    op.create_index("ix_transaction_fees_is_active", "transaction_fees", ["is_active"])


def downgrade() -> None:
    op.drop_index("ix_transaction_fees_is_active", table_name="transaction_fees")
    op.drop_index("ix_transaction_fees_payment_method", table_name="transaction_fees")
    op.drop_table("transaction_fees")
