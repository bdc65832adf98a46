"""Default availability templates: one per member (or member + unit), entries as JSON offsets from origin."""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "default_availabilities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("member", sa.Integer(), nullable=False),
        sa.Column("unit", sa.String(16), nullable=True),
        sa.Column("origin", sa.DateTime(timezone=True), nullable=False),
        sa.Column("entries_json", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("member", "unit", name="uq_default_availabilities_member_unit"),
    )
    op.create_index("ix_default_availabilities_member", "default_availabilities", ["member"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_default_availabilities_member", table_name="default_availabilities")
    op.drop_table("default_availabilities")
