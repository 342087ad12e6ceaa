"""Esquema inicial: mesas, sessões, cardápio, pedidos, divisões, notificações e auditoria

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 12:00:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _base_columns():
    return [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "tables",
        *_base_columns(),
        sa.Column("table_number", sa.String(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("occupied", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("current_session_id", sa.Uuid(), nullable=True),
        sa.Column("current_pin", sa.String(4), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("version_id", sa.Integer(), nullable=False),
    )
    op.create_index("ix_tables_id", "tables", ["id"])
    op.create_index("ix_tables_table_number", "tables", ["table_number"], unique=True)
    op.create_index("ix_tables_current_session_id", "tables", ["current_session_id"])

    op.create_table(
        "staff",
        *_base_columns(),
        sa.Column("staff_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True, unique=True),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("hashed_password", sa.String(), nullable=True),
    )
    op.create_index("ix_staff_id", "staff", ["id"])
    op.create_index("ix_staff_staff_id", "staff", ["staff_id"], unique=True)

    op.create_table(
        "menu_items",
        *_base_columns(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_menu_items_id", "menu_items", ["id"])
    op.create_index("ix_menu_items_name", "menu_items", ["name"])
    op.create_index("ix_menu_items_category", "menu_items", ["category"])

    op.create_table(
        "sessions",
        *_base_columns(),
        sa.Column("table_id", sa.Uuid(), sa.ForeignKey("tables.id"), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("started_by_name", sa.String(), nullable=True),
        sa.Column("served_by", sa.Uuid(), sa.ForeignKey("staff.id"), nullable=True),
        sa.Column("diners", sa.JSON(), nullable=False),
        sa.Column("payment_status", sa.String(32), nullable=False),
        sa.Column("payment_method", sa.String(32), nullable=True),
        sa.Column("tip_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("final_total", sa.Numeric(10, 2), nullable=True),
        sa.Column("payment_requested_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("payment_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_by", sa.String(), nullable=True),
        sa.Column("version_id", sa.Integer(), nullable=False),
    )
    op.create_index("ix_sessions_id", "sessions", ["id"])
    op.create_index("ix_sessions_table_id", "sessions", ["table_id"])
    op.create_index("ix_sessions_status", "sessions", ["status"])
    op.create_index("ix_sessions_served_by", "sessions", ["served_by"])

    op.create_table(
        "split_bills",
        *_base_columns(),
        sa.Column("session_id", sa.Uuid(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("menu_item_id", sa.Uuid(), sa.ForeignKey("menu_items.id"), nullable=False),
        sa.Column("original_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("split_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("split_count", sa.Integer(), nullable=False),
        sa.Column("participants", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_split_bills_id", "split_bills", ["id"])
    op.create_index("ix_split_bills_session_id", "split_bills", ["session_id"])

    op.create_table(
        "orders",
        *_base_columns(),
        sa.Column("session_id", sa.Uuid(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("menu_item_id", sa.Uuid(), sa.ForeignKey("menu_items.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_shared", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_takeaway", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("customizations", sa.JSON(), nullable=False),
        sa.Column("diner_name", sa.String(), nullable=True),
        sa.Column("split_bill_id", sa.Uuid(), sa.ForeignKey("split_bills.id", ondelete="SET NULL"), nullable=True),
    )
    op.create_index("ix_orders_id", "orders", ["id"])
    op.create_index("ix_orders_session_id", "orders", ["session_id"])
    op.create_index("ix_orders_status", "orders", ["status"])

    op.create_table(
        "notifications",
        *_base_columns(),
        sa.Column("session_id", sa.Uuid(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("priority", sa.String(32), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("acknowledged_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("acknowledged_by", sa.String(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_by", sa.String(), nullable=True),
    )
    op.create_index("ix_notifications_id", "notifications", ["id"])
    op.create_index("ix_notifications_session_id", "notifications", ["session_id"])
    op.create_index("ix_notifications_type", "notifications", ["type"])
    op.create_index("ix_notifications_status", "notifications", ["status"])

    op.create_table(
        "waiter_requests",
        *_base_columns(),
        sa.Column("session_id", sa.Uuid(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("request_type", sa.String(32), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("table_number", sa.String(), nullable=True),
        sa.Column("customer_name", sa.String(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_waiter_requests_id", "waiter_requests", ["id"])
    op.create_index("ix_waiter_requests_session_id", "waiter_requests", ["session_id"])

    op.create_table(
        "payment_notifications",
        *_base_columns(),
        sa.Column("session_id", sa.Uuid(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("table_number", sa.String(), nullable=True),
        sa.Column("payment_type", sa.String(), nullable=False, server_default="table"),
        sa.Column("subtotal", sa.Numeric(10, 2), nullable=False),
        sa.Column("vat_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("tip_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("final_total", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("acknowledged_by", sa.String(), nullable=True),
        sa.Column("acknowledged_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_payment_notifications_id", "payment_notifications", ["id"])
    op.create_index("ix_payment_notifications_session_id", "payment_notifications", ["session_id"])

    op.create_table(
        "audit_logs",
        *_base_columns(),
        sa.Column("session_id", sa.Uuid(), nullable=True),
        sa.Column("action", sa.String(32), nullable=False),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("performed_by", sa.String(), nullable=False, server_default="system"),
        sa.Column("ip_address", sa.String(), nullable=True),
        sa.Column("user_agent", sa.String(), nullable=True),
    )
    op.create_index("ix_audit_logs_id", "audit_logs", ["id"])
    op.create_index("ix_audit_logs_session_id", "audit_logs", ["session_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])

    op.create_table(
        "maintenance_runs",
        *_base_columns(),
        sa.Column("job_name", sa.String(), nullable=False),
        sa.Column("last_run_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
    )
    op.create_index("ix_maintenance_runs_id", "maintenance_runs", ["id"])
    op.create_index("ix_maintenance_runs_job_name", "maintenance_runs", ["job_name"], unique=True)


def downgrade() -> None:
    op.drop_table("maintenance_runs")
    op.drop_table("audit_logs")
    op.drop_table("payment_notifications")
    op.drop_table("waiter_requests")
    op.drop_table("notifications")
    op.drop_table("orders")
    op.drop_table("split_bills")
    op.drop_table("sessions")
    op.drop_table("menu_items")
    op.drop_table("staff")
    op.drop_table("tables")
