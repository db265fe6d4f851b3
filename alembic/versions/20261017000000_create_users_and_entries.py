"""Create users and entries tables with their unique constraints.

Revision ID: 20261017000000
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20261017000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("mobile_no", sa.String(length=10), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_created_at"), "users", ["created_at"], unique=False)

    op.create_table(
        "entries",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("sr_no", sa.String(length=20), nullable=False),
        sa.Column("vehicle_no", sa.String(length=20), nullable=False),
        sa.Column("name_details", sa.String(length=100), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("net_weight", sa.String(length=20), nullable=True),
        sa.Column("moisture", sa.String(length=20), nullable=True),
        sa.Column("gate_pass_no", sa.String(length=30), nullable=True),
        sa.Column("mobile_no", sa.String(length=10), nullable=True),
        sa.Column("unload", sa.String(length=50), nullable=True),
        sa.Column("shortage", sa.String(length=50), nullable=True),
        sa.Column("remarks", sa.String(length=200), nullable=True),
        sa.Column("rate", sa.String(length=20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "sr_no", name="uq_entries_user_id_sr_no"),
    )
    op.create_index(op.f("ix_entries_user_id"), "entries", ["user_id"], unique=False)
    op.create_index(op.f("ix_entries_created_at"), "entries", ["created_at"], unique=False)
    op.create_index(
        "ix_entries_user_id_date_created_at",
        "entries",
        ["user_id", "date", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_entries_user_id_vehicle_no", "entries", ["user_id", "vehicle_no"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_entries_user_id_vehicle_no", table_name="entries")
    op.drop_index("ix_entries_user_id_date_created_at", table_name="entries")
    op.drop_index(op.f("ix_entries_created_at"), table_name="entries")
    op.drop_index(op.f("ix_entries_user_id"), table_name="entries")
    op.drop_table("entries")
    op.drop_index(op.f("ix_users_created_at"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
