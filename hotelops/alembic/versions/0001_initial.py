"""create hotel operations tables

Revision ID: 0001_initial
Revises: None
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "hotels",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("slug", sa.String(), nullable=False, unique=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("hotel_id", sa.String(36), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("sla_minutes", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("hotel_id", "key", name="uq_services_hotel_key"),
        sa.CheckConstraint("sla_minutes >= 0", name="ck_services_sla_nonneg"),
    )
    op.create_index("ix_services_hotel_id", "services", ["hotel_id"])

    op.create_table(
        "tickets",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("hotel_id", sa.String(36), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("service_key", sa.String(), nullable=False),
        sa.Column("room", sa.String(), nullable=True),
        sa.Column("booking_code", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="open"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("minutes_to_close", sa.Integer(), nullable=True),
        sa.Column("on_time", sa.Boolean(), nullable=True),
    )
    op.create_index("ix_tickets_hotel_id", "tickets", ["hotel_id"])
    op.create_index("ix_tickets_closed_at", "tickets", ["closed_at"])

    op.create_table(
        "menu_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("hotel_id", sa.String(36), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("item_key", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint("hotel_id", "item_key", name="uq_menu_items_hotel_key"),
    )
    op.create_index("ix_menu_items_hotel_id", "menu_items", ["hotel_id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("hotel_id", sa.String(36), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("room", sa.String(), nullable=True),
        sa.Column("booking_code", sa.String(), nullable=True),
        sa.Column("item_key", sa.String(), nullable=False),
        sa.Column("qty", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="preparing"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("qty >= 1", name="ck_orders_qty_positive"),
    )
    op.create_index("ix_orders_hotel_id", "orders", ["hotel_id"])

    op.create_table(
        "ai_usage",
        sa.Column("hotel_id", sa.String(36), sa.ForeignKey("hotels.id"), primary_key=True),
        sa.Column("month_utc", sa.String(7), primary_key=True),
        sa.Column("used_tokens", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("budget_tokens", sa.Integer(), nullable=False, server_default="0"),
    )

    op.create_table(
        "reward_balances",
        sa.Column("user_id", sa.String(), primary_key=True),
        sa.Column("hotel_id", sa.String(36), sa.ForeignKey("hotels.id"), primary_key=True),
        sa.Column("available_paise", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("pending_paise", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("available_paise >= 0", name="ck_reward_balances_nonneg"),
    )

    op.create_table(
        "reward_vouchers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(), nullable=False, unique=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("hotel_id", sa.String(36), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("amount_paise", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_reward_vouchers_user_id", "reward_vouchers", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_reward_vouchers_user_id", table_name="reward_vouchers")
    op.drop_table("reward_vouchers")
    op.drop_table("reward_balances")
    op.drop_table("ai_usage")
    op.drop_index("ix_orders_hotel_id", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_menu_items_hotel_id", table_name="menu_items")
    op.drop_table("menu_items")
    op.drop_index("ix_tickets_closed_at", table_name="tickets")
    op.drop_index("ix_tickets_hotel_id", table_name="tickets")
    op.drop_table("tickets")
    op.drop_index("ix_services_hotel_id", table_name="services")
    op.drop_table("services")
    op.drop_table("hotels")
