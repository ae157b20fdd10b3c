"""
User model - identity record with hashed credentials and an optional avatar.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, LargeBinary, func
from sqlalchemy.orm import Mapped, deferred, mapped_column

from todo_api.db.base import Base


class User(Base):
    """User entity. Active sessions live in user_sessions; owned todos in todos."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    # Deferred: only the avatar endpoints load the blob
    avatar: Mapped[bytes | None] = deferred(mapped_column(LargeBinary, nullable=True))
    avatar_content_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
