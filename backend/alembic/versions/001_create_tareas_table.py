"""Create tareas table

Revision ID: 001
Revises: None
Create Date: 2026-10-16 00:00:00.000000+00:00

What:  Creates the `tareas` table holding every principal's tasks.
How:   UUID primary key generated server-side, owner id as text, and a
       composite (user_id, created_at DESC) index for the per-owner list.

Row-level policies are not created here; ownership is enforced by the
user_id predicate on every query the application issues.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tareas",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Unique task identifier",
        ),
        sa.Column(
            "user_id",
            sa.String(64),
            nullable=False,
            comment="Owning principal id issued by the identity service",
        ),
        sa.Column(
            "texto",
            sa.Text(),
            nullable=False,
            comment="Task text, never blank",
        ),
        sa.Column(
            "hecha",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
            comment="Completion flag",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the task was created (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Serves WHERE user_id = :owner ORDER BY created_at DESC
    op.create_index(
        "idx_tareas_user_created_at",
        "tareas",
        ["user_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    """Drop the tareas table. Destructive: all tasks are lost."""
    op.drop_index("idx_tareas_user_created_at", table_name="tareas")
    op.drop_table("tareas")
