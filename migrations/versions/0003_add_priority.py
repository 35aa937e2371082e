"""add priority"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0003_add_priority"
down_revision = "0002_add_due_date"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("tasks", sa.Column("priority", sa.Integer(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("tasks") as batch_op:
        batch_op.drop_column("priority")
