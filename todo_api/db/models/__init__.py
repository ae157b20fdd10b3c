from todo_api.db.models.todo import Todo
from todo_api.db.models.user import User
from todo_api.db.models.user_session import UserSession

__all__ = ["User", "UserSession", "Todo"]
