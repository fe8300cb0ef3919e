"""
Tareas Backend: Task SQLAlchemy Model
=====================================

What:  ORM model representing the `tareas` table.
Who:   Used by SqlTaskStore for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key, generated in Python so the store knows it before flush
    - user_id: the identity service's user id (opaque string)
    - text (column `texto`): trimmed, non-empty task text
    - done (column `hecha`): completion flag, false on insert, never updated
    - created_at: UTC with timezone

    Column names match the existing `tareas` table, so the ORM can be
    pointed at a database the Spanish-named schema already created.

    Index on (user_id, created_at DESC):
        Every query filters by owner and lists newest first.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy import text as sql_text
from sqlalchemy.orm import Mapped, mapped_column

from tareas.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(Base):
    """
    A single to-do item owned by one principal.

    Lifecycle:
        1. Created by the owner (done = false)
        2. Read by the owner only
        3. Deleted by the owner only; never edited in place
    """

    __tablename__ = "tareas"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Owning principal id, as issued by the identity service",
    )

    text: Mapped[str] = mapped_column(
        "texto",
        Text,
        nullable=False,
    )

    done: Mapped[bool] = mapped_column(
        "hecha",
        Boolean,
        nullable=False,
        default=False,
        server_default=sql_text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_tareas_user_created_at", "user_id", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, user_id='{self.user_id}', done={self.done})>"
