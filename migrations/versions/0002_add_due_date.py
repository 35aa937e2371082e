"""add due date"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_add_due_date"
down_revision = "0001_create_tasks"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("tasks", sa.Column("dueDate", sa.Text(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("tasks") as batch_op:
        batch_op.drop_column("dueDate")
