"""Initial schema for the voucher sales portal."""
from __future__ import annotations

from collections.abc import Iterable

import sqlalchemy as sa
from alembic import op

revision = "20250601_01"
down_revision = None
branch_labels = None
depends_on: Iterable[str] | None = None


def _drop_enum(name: str) -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        op.execute(sa.text(f"DROP TYPE IF EXISTS {name}"))


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:  # noqa: D401
    """Create portal tables and constraints."""

    user_role = sa.Enum("ADMIN", "RETAILER", "AGENT", "TERMINAL", name="user_role")
    user_status = sa.Enum("ACTIVE", "DISABLED", name="user_status")
    retailer_status = sa.Enum("ACTIVE", "SUSPENDED", "INACTIVE", name="retailer_status")
    terminal_status = sa.Enum("ACTIVE", "INACTIVE", name="terminal_status")

    for enum_type in (user_role, user_status, retailer_status, terminal_status):
        enum_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("status", user_status, nullable=False, server_default="ACTIVE"),
        *_timestamps(),
    )

    op.create_table(
        "retailers",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "user_profile_id",
            sa.String(length=36),
            sa.ForeignKey("user_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "agent_profile_id",
            sa.String(length=36),
            sa.ForeignKey("user_profiles.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", retailer_status, nullable=False, server_default="ACTIVE"),
        sa.Column("commission_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_retailers_user_profile_id", "retailers", ["user_profile_id"])
    op.create_index("ix_retailers_agent_profile_id", "retailers", ["agent_profile_id"])

    op.create_table(
        "terminals",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "retailer_id",
            sa.String(length=36),
            sa.ForeignKey("retailers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("status", terminal_status, nullable=False, server_default="ACTIVE"),
        sa.Column("last_active", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "user_profile_id",
            sa.String(length=36),
            sa.ForeignKey("user_profiles.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_terminals_retailer_id", "terminals", ["retailer_id"])

    op.create_table(
        "sales",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "terminal_id",
            sa.String(length=36),
            sa.ForeignKey("terminals.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("voucher_type", sa.String(length=64), nullable=True),
        sa.Column("ref_number", sa.String(length=64), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("supplier_commission_pct", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("retailer_commission", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("agent_commission", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("profit", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_sales_terminal_id", "sales", ["terminal_id"])
    op.create_index("ix_sales_created_at", "sales", ["created_at"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "actor_id",
            sa.String(length=36),
            sa.ForeignKey("user_profiles.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("action", sa.String(length=128), nullable=False),
        sa.Column("resource_type", sa.String(length=128), nullable=False),
        sa.Column("resource_id", sa.String(length=128), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_audit_logs_resource", "audit_logs", ["resource_type", "resource_id"])


def downgrade() -> None:  # noqa: D401
    """Drop all portal tables."""

    op.drop_index("ix_audit_logs_resource", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_sales_created_at", table_name="sales")
    op.drop_index("ix_sales_terminal_id", table_name="sales")
    op.drop_table("sales")

    op.drop_index("ix_terminals_retailer_id", table_name="terminals")
    op.drop_table("terminals")

    op.drop_index("ix_retailers_agent_profile_id", table_name="retailers")
    op.drop_index("ix_retailers_user_profile_id", table_name="retailers")
    op.drop_table("retailers")

    op.drop_table("user_profiles")

    for enum_name in ["terminal_status", "retailer_status", "user_status", "user_role"]:
        _drop_enum(enum_name)
