"""
Tareas Backend: Task Store Capability
=====================================

What:  The three owner-scoped storage operations the task service needs,
       plus the SQLAlchemy implementation used in production.
How:   Every query carries an explicit `user_id = :owner_id` predicate.
       Ownership isolation therefore holds in application code whether or
       not the database also has a row-level policy on the table.

Query plans (SqlTaskStore):
    list_owned:   SELECT ... WHERE user_id = :owner ORDER BY created_at DESC
                  → idx_tareas_user_created_at
    insert_owned: INSERT ... (id, user_id, text, done=false, created_at)
    delete_owned: DELETE ... WHERE id = :id AND user_id = :owner
"""

import uuid
from abc import ABC, abstractmethod
from typing import List

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tareas.models.task import Task, utcnow
from tareas.schemas.task import TaskResponse


class TaskStore(ABC):
    """Owner-scoped task persistence."""

    @abstractmethod
    async def list_owned(self, owner_id: str) -> List[TaskResponse]:
        """Tasks owned by owner_id, newest first."""
        ...

    @abstractmethod
    async def insert_owned(self, owner_id: str, text: str) -> TaskResponse:
        """Insert one task owned by owner_id with done = false."""
        ...

    @abstractmethod
    async def delete_owned(self, owner_id: str, task_id: uuid.UUID) -> bool:
        """Delete the task if owner_id owns it. Returns whether a row was removed."""
        ...


class SqlTaskStore(TaskStore):
    """
    TaskStore over an async SQLAlchemy session.

    Writes commit immediately so a failure surfaces inside the request that
    caused it, not in the session teardown. A failed write rolls the session
    back before re-raising, so the same request can still read from it.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_owned(self, owner_id: str) -> List[TaskResponse]:
        result = await self.session.execute(
            select(Task)
            .where(Task.user_id == owner_id)
            .order_by(desc(Task.created_at))
        )
        return [TaskResponse.model_validate(row) for row in result.scalars().all()]

    async def insert_owned(self, owner_id: str, text: str) -> TaskResponse:
        task = Task(
            id=uuid.uuid4(),
            user_id=owner_id,
            text=text,
            done=False,
            created_at=utcnow(),
        )
        self.session.add(task)
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        return TaskResponse.model_validate(task)

    async def delete_owned(self, owner_id: str, task_id: uuid.UUID) -> bool:
        try:
            result = await self.session.execute(
                delete(Task).where(Task.id == task_id, Task.user_id == owner_id)
            )
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        return (result.rowcount or 0) > 0
