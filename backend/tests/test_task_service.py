"""
Tareas Backend: Task Service Unit Tests
=======================================

What:  Tests for TaskService business logic (list, create, delete).
How:   Uses a mocked TaskStore; no database.

What we test:
    ✅ Blank and whitespace-only text is rejected before the store is called
    ✅ Text is trimmed and the owner comes from the principal
    ✅ Store failures surface as TaskStoreError with a generic message
    ✅ Deleting an unowned task is reported, not raised
"""

import uuid
from datetime import datetime, timezone

import pytest

from tareas.exceptions import TaskStoreError, ValidationError
from tareas.schemas.task import Principal, TaskResponse
from tareas.services.task_service import TaskService


def make_task(owner: str, text: str = "buy milk") -> TaskResponse:
    return TaskResponse(
        id=uuid.uuid4(),
        user_id=owner,
        text=text,
        done=False,
        created_at=datetime.now(timezone.utc),
    )


class TestCreateTask:

    def setup_method(self):
        self.service = TaskService()
        self.principal = Principal(id="user-1", email="u1@example.com")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\t\n", None])
    async def test_blank_text_rejected_without_store_call(self, mock_store, text):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_task(mock_store, self.principal, text)

        assert exc_info.value.field == "text"
        mock_store.insert_owned.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_text_is_trimmed_and_owned_by_principal(self, mock_store):
        mock_store.insert_owned.return_value = make_task("user-1", "buy milk")

        result = await self.service.create_task(mock_store, self.principal, "  buy milk  ")

        mock_store.insert_owned.assert_awaited_once_with("user-1", "buy milk")
        assert result.done is False
        assert result.user_id == "user-1"

    @pytest.mark.asyncio
    async def test_store_failure_becomes_task_store_error(self, mock_store):
        mock_store.insert_owned.side_effect = ConnectionError("connection reset")

        with pytest.raises(TaskStoreError) as exc_info:
            await self.service.create_task(mock_store, self.principal, "t1")

        assert "connection reset" not in exc_info.value.message
        assert exc_info.value.context["error_type"] == "ConnectionError"


class TestListTasks:

    def setup_method(self):
        self.service = TaskService()
        self.principal = Principal(id="user-1")

    @pytest.mark.asyncio
    async def test_lists_only_for_principal(self, mock_store):
        tasks = [make_task("user-1", "t2"), make_task("user-1", "t1")]
        mock_store.list_owned.return_value = tasks

        result = await self.service.list_tasks(mock_store, self.principal)

        mock_store.list_owned.assert_awaited_once_with("user-1")
        assert [t.text for t in result] == ["t2", "t1"]

    @pytest.mark.asyncio
    async def test_empty_list(self, mock_store):
        mock_store.list_owned.return_value = None
        assert await self.service.list_tasks(mock_store, self.principal) == []

    @pytest.mark.asyncio
    async def test_store_failure(self, mock_store):
        mock_store.list_owned.side_effect = RuntimeError("boom")
        with pytest.raises(TaskStoreError):
            await self.service.list_tasks(mock_store, self.principal)


class TestDeleteTask:

    def setup_method(self):
        self.service = TaskService()
        self.principal = Principal(id="user-1")

    @pytest.mark.asyncio
    async def test_delete_owned(self, mock_store):
        task_id = uuid.uuid4()
        assert await self.service.delete_task(mock_store, self.principal, task_id) is True
        mock_store.delete_owned.assert_awaited_once_with("user-1", task_id)

    @pytest.mark.asyncio
    async def test_delete_unowned_is_not_an_error(self, mock_store):
        mock_store.delete_owned.return_value = False
        assert await self.service.delete_task(mock_store, self.principal, uuid.uuid4()) is False

    @pytest.mark.asyncio
    async def test_store_failure_carries_task_id(self, mock_store):
        task_id = uuid.uuid4()
        mock_store.delete_owned.side_effect = RuntimeError("boom")

        with pytest.raises(TaskStoreError) as exc_info:
            await self.service.delete_task(mock_store, self.principal, task_id)

        assert exc_info.value.context["task_id"] == str(task_id)
