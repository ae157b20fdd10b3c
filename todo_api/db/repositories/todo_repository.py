"""
Todo repository - todo data access. Ownership scoping is the caller's criteria, never implicit here.
"""

from todo_api.db.models.todo import Todo
from todo_api.db.repositories.base_repository import BaseRepository


class TodoRepository(BaseRepository[Todo]):
    def __init__(self, session):
        super().__init__(session, Todo)
