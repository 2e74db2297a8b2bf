"""create ledger tables

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-17 09:12:40.512873

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1c9a2b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the registries, the notification log and the state row."""
    op.create_table(
        "ledger_state",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("paused", sa.Boolean(), nullable=False),
        sa.Column("block_seq", sa.BigInteger(), nullable=False),
        sa.Column("request_total", sa.BigInteger(), nullable=False),
        sa.Column("session_total", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "prompt_record",
        sa.Column("request_id", sa.LargeBinary(length=32), nullable=False),
        sa.Column("order_index", sa.BigInteger(), nullable=False),
        sa.Column("sender", sa.String(length=42), nullable=False),
        sa.Column("block", sa.BigInteger(), nullable=False),
        sa.Column("prompt_hash", sa.LargeBinary(length=32), nullable=False),
        sa.PrimaryKeyConstraint("request_id"),
        sa.UniqueConstraint("order_index"),
    )
    op.create_table(
        "response_record",
        sa.Column("request_id", sa.LargeBinary(length=32), nullable=False),
        sa.Column("response_hash", sa.LargeBinary(length=32), nullable=False),
        sa.Column("block", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("request_id"),
    )
    op.create_table(
        "ledger_session",
        sa.Column("session_id", sa.LargeBinary(length=32), nullable=False),
        sa.Column("order_index", sa.BigInteger(), nullable=False),
        sa.Column("request_count", sa.Integer(), nullable=False),
        sa.Column("block", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("session_id"),
        sa.UniqueConstraint("order_index"),
    )
    op.create_table(
        "session_request",
        sa.Column("session_id", sa.LargeBinary(length=32), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("request_id", sa.LargeBinary(length=32), nullable=False),
        sa.ForeignKeyConstraint(["session_id"], ["ledger_session.session_id"]),
        sa.PrimaryKeyConstraint("session_id", "position"),
    )
    op.create_table(
        "ledger_event",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("kind", sa.String(length=64), nullable=False),
        sa.Column("block", sa.BigInteger(), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_ledger_event_kind", "ledger_event", ["kind"], unique=False)


def downgrade() -> None:
    """Drop every ledger table."""
    op.drop_index("ix_ledger_event_kind", table_name="ledger_event")
    op.drop_table("ledger_event")
    op.drop_table("session_request")
    op.drop_table("ledger_session")
    op.drop_table("response_record")
    op.drop_table("prompt_record")
    op.drop_table("ledger_state")
