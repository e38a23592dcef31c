"""create state_snapshot table

Revision ID: a7c1e2d3f4b5
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = 'a7c1e2d3f4b5'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "state_snapshot",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("state_key", sa.String(100), nullable=False),
        sa.Column("revision", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("document", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_state_snapshot_state_key", "state_snapshot", ["state_key"], unique=True)


def downgrade():
    op.drop_index("ix_state_snapshot_state_key", table_name="state_snapshot")
    op.drop_table("state_snapshot")
