"""Member directory read model (members, member_units). Populated by the HR sync."""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "members",
        sa.Column("number", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("first_name", sa.String(128), nullable=False),
        sa.Column("last_name", sa.String(128), nullable=False),
        sa.Column("rank", sa.String(64), nullable=True),
        sa.Column("mobile", sa.String(32), nullable=True),
        sa.Column("qualifications_json", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("number"),
    )
    op.create_table(
        "member_units",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("member", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(16), nullable=False),
        sa.Column("team", sa.String(64), nullable=True),
        sa.Column("permission", sa.String(16), nullable=False, server_default="EDIT_SELF"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["member"], ["members.number"], ondelete="CASCADE"),
    )
    op.create_index("ix_member_units_member", "member_units", ["member"], unique=False)
    op.create_index("ix_member_units_code", "member_units", ["code"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_member_units_code", table_name="member_units")
    op.drop_index("ix_member_units_member", table_name="member_units")
    op.drop_table("member_units")
    op.drop_table("members")
