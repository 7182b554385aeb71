"""Create user_security_flags and the range-scan indexes used by risk checks.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "user_security_flags",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("flag", sa.String(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "flag IN ('blocked_user', 'account_compromised', 'critical_risk')",
            name="user_security_flags_flag_valid",
        ),
    )
    op.create_index(
        op.f("ix_user_security_flags_user_id"),
        "user_security_flags",
        ["user_id"],
    )
    op.create_index(
        "ix_withdrawals_user_id_created_at",
        "withdrawals",
        ["user_id", "created_at"],
    )
    op.create_index(
        "ix_withdrawal_security_logs_user_id_created_at",
        "withdrawal_security_logs",
        ["user_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_withdrawal_security_logs_user_id_created_at",
        table_name="withdrawal_security_logs",
    )
    op.drop_index("ix_withdrawals_user_id_created_at", table_name="withdrawals")
    op.drop_index(op.f("ix_user_security_flags_user_id"), table_name="user_security_flags")
    op.drop_table("user_security_flags")
