"""
API router - aggregates all endpoint modules (RESTful structure).
Mounted at the root: the public paths are /users, /todos and /health.
"""

from fastapi import APIRouter

from todo_api.api.endpoints import health, todos, users

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(todos.router, prefix="/todos", tags=["todos"])
