"""Ajustes de conta: estorno de pedidos, descontos e pagamentos individuais

Revision ID: 0002_bill_adjustments
Revises: 0001_initial
Create Date: 2026-10-19 15:00:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0002_bill_adjustments"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("orders", sa.Column("voided_at", sa.DateTime(timezone=True), nullable=True))
    op.add_column("orders", sa.Column("void_reason", sa.String(), nullable=True))

    op.add_column("payment_notifications", sa.Column("diner_name", sa.String(), nullable=True))
    op.add_column("payment_notifications", sa.Column("payment_method", sa.String(32), nullable=True))
    op.add_column("payment_notifications", sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True))

    op.create_table(
        "discounts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("session_id", sa.Uuid(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("applied_by", sa.String(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
    )
    op.create_index("ix_discounts_id", "discounts", ["id"])
    op.create_index("ix_discounts_session_id", "discounts", ["session_id"])


def downgrade() -> None:
    op.drop_table("discounts")
    op.drop_column("payment_notifications", "completed_at")
    op.drop_column("payment_notifications", "payment_method")
    op.drop_column("payment_notifications", "diner_name")
    op.drop_column("orders", "void_reason")
    op.drop_column("orders", "voided_at")
