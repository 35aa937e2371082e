"""create preferences table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0005_create_preferences"
down_revision = "0004_text_task_ids"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "preferences",
        sa.Column("key", sa.String(length=64), primary_key=True),
        sa.Column("value", sa.JSON(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("preferences")
