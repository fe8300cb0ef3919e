"""
Tareas Backend: Task API Route Handlers
=======================================

What:  JSON API over the caller's own tasks.
How:   Every handler depends on require_api_principal, so a request without a
       valid session gets 401 before any store access happens.

Caching:
    Responses are per-user; Cache-Control: private, no-store on reads.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Response, status

from tareas.dependencies import ApiPrincipal, Store
from tareas.exceptions import NotFoundError
from tareas.schemas.task import ErrorResponse, TaskCreate, TaskResponse
from tareas.services.task_service import task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Tasks"])


@router.get(
    "/tareas",
    response_model=List[TaskResponse],
    responses={
        401: {"description": "No valid session", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="List the caller's tasks, newest first",
)
async def list_tasks(
    response: Response,
    principal: ApiPrincipal,
    store: Store,
) -> List[TaskResponse]:
    tasks = await task_service.list_tasks(store, principal)
    response.headers["Cache-Control"] = "private, no-store"
    response.headers["X-Total-Count"] = str(len(tasks))
    return tasks


@router.post(
    "/tareas",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Blank task text", "model": ErrorResponse},
        401: {"description": "No valid session", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Create a task owned by the caller",
)
async def create_task(
    body: TaskCreate,
    principal: ApiPrincipal,
    store: Store,
) -> TaskResponse:
    """
    The owner is always the session's principal; any owner field in the
    body is ignored.
    """
    return await task_service.create_task(store, principal, body.text)


@router.delete(
    "/tareas/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        401: {"description": "No valid session", "model": ErrorResponse},
        404: {"description": "No such task owned by the caller", "model": ErrorResponse},
    },
    summary="Delete one of the caller's tasks",
)
async def delete_task(
    task_id: UUID,
    principal: ApiPrincipal,
    store: Store,
) -> Response:
    deleted = await task_service.delete_task(store, principal, task_id)
    if not deleted:
        raise NotFoundError(resource="task", resource_id=str(task_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
