"""Availability intervals: one row per [start, end) of a member's (or member + unit's) timeline.

Rows of one partition never overlap; the store's write path trims and splits them.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "availability_intervals",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("member", sa.Integer(), nullable=False),
        sa.Column("unit", sa.String(16), nullable=True),
        sa.Column("start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("storm", sa.String(16), nullable=True),
        sa.Column("rescue", sa.String(16), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint('"start" < "end"', name="ck_availability_intervals_range"),
    )
    op.create_index(
        "ix_availability_intervals_member_range", "availability_intervals", ["member", "start", "end"], unique=False
    )
    op.create_index("ix_availability_intervals_range", "availability_intervals", ["start", "end"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_availability_intervals_range", table_name="availability_intervals")
    op.drop_index("ix_availability_intervals_member_range", table_name="availability_intervals")
    op.drop_table("availability_intervals")
