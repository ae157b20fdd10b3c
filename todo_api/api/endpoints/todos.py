"""
Todo CRUD endpoints - every route is scoped to the authenticated owner.
Design: Thin controller; service layer holds business logic.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, status

from todo_api.core.dependencies import CurrentUser, Todos
from todo_api.schemas.todo import TodoCreate, TodoQueryParams, TodoResponse

router = APIRouter()


@router.get("", response_model=list[TodoResponse])
async def list_todos(
    user: CurrentUser,
    todos: Todos,
    completed: str | None = None,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    limit: str | None = None,
    skip: str | None = None,
):
    """List the caller's todos. REST: GET /todos?completed=true&sortBy=description:desc&limit=10&skip=0."""
    params = TodoQueryParams(completed=completed, sort_by=sort_by, limit=limit, skip=skip)
    return await todos.list_todos(user.id, params)


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
async def create_todo(data: TodoCreate, user: CurrentUser, todos: Todos):
    """Create a todo owned by the caller. Any owner in the body is ignored."""
    return await todos.create(user.id, data)


@router.get("/{todo_id}", response_model=TodoResponse)
async def get_todo(todo_id: int, user: CurrentUser, todos: Todos):
    return await todos.get(user.id, todo_id)


@router.patch("/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: int,
    user: CurrentUser,
    todos: Todos,
    changes: Annotated[dict[str, Any], Body()],
):
    """Update description and/or completed."""
    return await todos.update(user.id, todo_id, changes)


@router.delete("/{todo_id}", response_model=TodoResponse)
async def delete_todo(todo_id: int, user: CurrentUser, todos: Todos):
    return await todos.delete(user.id, todo_id)
