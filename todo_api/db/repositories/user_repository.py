"""
User repository - encapsulates user and session data access (SOLID: Single Responsibility).
Challenge: Keep queries in one place for optimization and reuse.
"""

from sqlalchemy import delete, exists, select
from sqlalchemy.orm import undefer

from todo_api.core.security import hash_session_id
from todo_api.db.models.user import User
from todo_api.db.models.user_session import UserSession
from todo_api.db.repositories.base_repository import BaseRepository, fits_int64


class UserRepository(BaseRepository[User]):
    """User-specific queries. Extends base CRUD with credential and session lookups."""

    def __init__(self, session):
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        """Find user by (already normalized) email - used for authentication."""
        return await self.find_one(email=email)

    async def get_with_avatar(self, id: int) -> User | None:
        if not fits_int64(id):
            return None
        result = await self.session.execute(
            select(User)
            .where(User.id == id)
            .options(undefer(User.avatar))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def add_session(self, user_id: int, session_id: str) -> None:
        self.session.add(UserSession(user_id=user_id, session_hash=hash_session_id(session_id)))
        await self.session.flush()

    async def remove_session(self, user_id: int, session_id: str) -> bool:
        """Drop one session. Removing an absent session is a no-op (returns False)."""
        result = await self.session.execute(
            delete(UserSession).where(
                UserSession.user_id == user_id,
                UserSession.session_hash == hash_session_id(session_id),
            )
        )
        return bool(result.rowcount)

    async def clear_sessions(self, user_id: int) -> int:
        result = await self.session.execute(delete(UserSession).where(UserSession.user_id == user_id))
        return result.rowcount or 0

    async def has_active_session(self, user_id: int, session_id: str) -> bool:
        result = await self.session.execute(
            select(
                exists().where(
                    UserSession.user_id == user_id,
                    UserSession.session_hash == hash_session_id(session_id),
                )
            )
        )
        return bool(result.scalar())
