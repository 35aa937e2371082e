"""store task ids as text"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0004_text_task_ids"
down_revision = "0003_add_priority"
branch_labels = None
depends_on = None

COLUMNS = "id, title, description, isCompleted, dueDate, priority"


def _rebuild(id_type: sa.types.TypeEngine, id_expr: str) -> None:
    op.create_table(
        "tasks_new",
        sa.Column("id", id_type, primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("isCompleted", sa.Integer(), nullable=False),
        sa.Column("dueDate", sa.Text(), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=True),
    )
    op.execute(
        f"INSERT INTO tasks_new ({COLUMNS}) "
        f"SELECT {id_expr}, title, description, isCompleted, dueDate, priority FROM tasks"
    )
    op.drop_table("tasks")
    op.rename_table("tasks_new", "tasks")


def upgrade() -> None:
    _rebuild(sa.Text(), "CAST(id AS TEXT)")


def downgrade() -> None:
    _rebuild(sa.Integer(), "CAST(id AS INTEGER)")
