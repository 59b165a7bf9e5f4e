"""create winners ledger

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "winners",
        sa.Column(
            "pk",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            autoincrement=True,
            nullable=False,
        ),
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("guide_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("supervisor", sa.String(length=255), nullable=False),
        sa.Column("department", sa.String(length=255), nullable=False),
        sa.Column("nps", sa.Float(), nullable=False),
        sa.Column("nrpc", sa.Float(), nullable=False),
        sa.Column("refund_percent", sa.Float(), nullable=False),
        sa.Column("total_tickets", sa.Integer(), nullable=False),
        sa.Column("won_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("pk", name="pk_winners"),
        sa.UniqueConstraint("id", name="winners_id_key"),
        sa.UniqueConstraint("guide_id", name="winners_guide_id_key"),
    )
    op.create_index("ix_winners_department", "winners", ["department"])


def downgrade() -> None:
    op.drop_index("ix_winners_department", table_name="winners")
    op.drop_table("winners")
