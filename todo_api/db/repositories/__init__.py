# Repository pattern: abstract data access (SOLID - Dependency Inversion)

from todo_api.db.repositories.todo_repository import TodoRepository
from todo_api.db.repositories.user_repository import UserRepository

__all__ = ["UserRepository", "TodoRepository"]
