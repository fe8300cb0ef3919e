"""
Tareas Backend: Task Service (Data Accessor)
============================================

What:  Business rules for listing, creating and deleting a principal's tasks.
How:   Stateless; receives the store and the principal on every call, so the
       owner id always comes from the validated session and never from the
       request body.

Error Handling Strategy:
    - Blank text → ValidationError before the store is touched
    - Any store failure → logged, re-raised as TaskStoreError (generic message)
    - Deleting a task the principal does not own is a no-op, not an error
"""

import logging
import uuid
from typing import List

from tareas.exceptions import TareasError, TaskStoreError, ValidationError
from tareas.schemas.task import Principal, TaskResponse
from tareas.services.task_store import TaskStore

logger = logging.getLogger(__name__)


class TaskService:
    """Owner-scoped task operations used by both the pages and the JSON API."""

    async def list_tasks(self, store: TaskStore, principal: Principal) -> List[TaskResponse]:
        """
        All tasks owned by the principal, newest first.

        Returns an empty list when the principal has no tasks.
        """
        try:
            tasks = await store.list_owned(principal.id)
        except TareasError:
            raise
        except Exception as e:
            logger.error("Store error listing tasks for %s: %s", principal.id, e, exc_info=True)
            raise TaskStoreError(
                message="Could not load your tasks. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return list(tasks or [])

    async def create_task(self, store: TaskStore, principal: Principal, text: str) -> TaskResponse:
        """
        Create one task for the principal.

        Raises:
            ValidationError: text is empty or whitespace-only (store not called)
            TaskStoreError: the store failed to insert the row
        """
        cleaned = (text or "").strip()
        if not cleaned:
            raise ValidationError(message="Task text is required", field="text")

        try:
            task = await store.insert_owned(principal.id, cleaned)
        except TareasError:
            raise
        except Exception as e:
            logger.error("Store error creating task for %s: %s", principal.id, e, exc_info=True)
            raise TaskStoreError(
                message="Could not create the task. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Task %s created for %s", task.id, principal.id)
        return task

    async def delete_task(self, store: TaskStore, principal: Principal, task_id: uuid.UUID) -> bool:
        """
        Delete a task if the principal owns it.

        Returns False when no row matched (unknown id or someone else's task).
        """
        try:
            deleted = await store.delete_owned(principal.id, task_id)
        except TareasError:
            raise
        except Exception as e:
            logger.error("Store error deleting task %s for %s: %s", task_id, principal.id, e, exc_info=True)
            raise TaskStoreError(
                message="Could not delete the task. Please try again.",
                context={"task_id": str(task_id), "error_type": type(e).__name__},
            )

        if deleted:
            logger.info("Task %s deleted by %s", task_id, principal.id)
        else:
            logger.info("Delete of task %s by %s matched no owned row", task_id, principal.id)
        return deleted


task_service = TaskService()
