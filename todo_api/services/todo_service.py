"""
Todo service - business logic for todos (SOLID: Single Responsibility).
Challenge: Every read and write is scoped to the caller; someone else's todo looks exactly like a missing one.
Design: Service depends on abstractions (repositories); easy to test with mocks.
"""

import logging
from typing import Any

from todo_api.core.exceptions import NotFoundError, ValidationError
from todo_api.core.validation import validate_input
from todo_api.db.models.todo import Todo
from todo_api.db.repositories.todo_repository import TodoRepository
from todo_api.db.repositories.user_repository import UserRepository
from todo_api.schemas.todo import TodoCreate, TodoQueryParams, TodoResponse, TodoUpdate
from todo_api.services.todo_query import build_query

logger = logging.getLogger(__name__)

ALLOWED_TODO_UPDATES = frozenset({"description", "completed"})


def _todo_to_response(todo: Todo) -> TodoResponse:
    return TodoResponse.model_validate(todo)


class TodoService:
    """Handles all todo use cases for one owner at a time."""

    def __init__(self, todo_repo: TodoRepository, user_repo: UserRepository):
        self.todo_repo = todo_repo
        self.user_repo = user_repo

    async def list_todos(self, owner_id: int, params: TodoQueryParams) -> list[TodoResponse]:
        """Filtered, sorted, paginated todos of the owner. A fresh query every call."""
        query = build_query(owner_id, params)
        todos = await self.todo_repo.find_many(
            query.criteria, sort=query.sort, limit=query.limit, skip=query.skip
        )
        logger.debug("Listed %s todo(s) for owner id=%s", len(todos), owner_id)
        return [_todo_to_response(t) for t in todos]

    async def create(self, owner_id: int, data: TodoCreate) -> TodoResponse:
        if await self.user_repo.get_by_id(owner_id) is None:
            raise NotFoundError("Owner not found")
        todo = Todo(description=data.description, completed=data.completed, owner_id=owner_id)
        todo = await self.todo_repo.insert(todo)
        return _todo_to_response(todo)

    async def get(self, owner_id: int, todo_id: int) -> TodoResponse:
        todo = await self.todo_repo.find_one(id=todo_id, owner_id=owner_id)
        if todo is None:
            raise NotFoundError()
        return _todo_to_response(todo)

    async def update(self, owner_id: int, todo_id: int, changes: dict[str, Any]) -> TodoResponse:
        """Apply an allow-listed patch. Unknown keys are rejected before any lookup."""
        if not set(changes) <= ALLOWED_TODO_UPDATES:
            raise ValidationError("Invalid Update!")
        data = validate_input(TodoUpdate, changes)
        patch = data.model_dump(include=data.model_fields_set)
        for field, value in patch.items():
            if value is None:
                raise ValidationError(f"{field}: may not be null")

        todo = await self.todo_repo.update_one({"id": todo_id, "owner_id": owner_id}, patch)
        if todo is None:
            raise NotFoundError()
        return _todo_to_response(todo)

    async def delete(self, owner_id: int, todo_id: int) -> TodoResponse:
        todo = await self.todo_repo.delete_one(id=todo_id, owner_id=owner_id)
        if todo is None:
            raise NotFoundError()
        return _todo_to_response(todo)
