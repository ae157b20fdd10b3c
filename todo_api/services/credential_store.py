"""
Credential store - user records, password checks and the active-session set.
Challenge: Never leak which half of a login failed; never persist a plaintext password.
Design: Validation goes through the same pydantic schemas the API uses, so both paths agree.
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError

from todo_api.config import get_settings
from todo_api.core.exceptions import ConflictError, CredentialsError, NotFoundError, ValidationError
from todo_api.core.security import hash_password, pwd_context, verify_password
from todo_api.core.validation import validate_input
from todo_api.db.models.user import User
from todo_api.db.repositories.todo_repository import TodoRepository
from todo_api.db.repositories.user_repository import UserRepository
from todo_api.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)
settings = get_settings()

ALLOWED_USER_UPDATES = frozenset({"name", "email", "password"})
AVATAR_CONTENT_TYPES = frozenset({"image/png", "image/jpeg", "image/jpg"})
# Leading bytes of each accepted image format
IMAGE_SIGNATURES = {
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"\xff\xd8\xff": "image/jpeg",
}


def sniff_image_type(data: bytes) -> str | None:
    """Media type from the file signature, or None when the bytes are not a PNG or JPEG."""
    for signature, media_type in IMAGE_SIGNATURES.items():
        if data.startswith(signature):
            return media_type
    return None


class CredentialStore:
    """Persisted users plus their sessions. All lookups use the normalized email."""

    def __init__(self, user_repo: UserRepository, todo_repo: TodoRepository):
        self.user_repo = user_repo
        self.todo_repo = todo_repo

    async def create(self, name: str, email: str, password: str) -> User:
        """Register a user. Password is hashed before it ever reaches the session."""
        data = validate_input(UserCreate, {"name": name, "email": email, "password": password})
        if await self.user_repo.get_by_email(data.email):
            raise ConflictError()
        user = User(
            name=data.name,
            email=data.email,
            hashed_password=hash_password(data.password),
        )
        try:
            user = await self.user_repo.insert(user)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration of the same email
            raise ConflictError() from exc
        logger.info("Registered user id=%s", user.id)
        return user

    async def find_by_credentials(self, email: str, password: str) -> User:
        """Return the user for a valid email/password pair; one error for every failure."""
        user = None
        if isinstance(email, str) and isinstance(password, str):
            user = await self.user_repo.get_by_email(email.strip().lower())
        if user is None:
            # Spend the same hashing time as a real check
            pwd_context.dummy_verify()
            raise CredentialsError()
        if not verify_password(password, user.hashed_password):
            raise CredentialsError()
        return user

    async def get(self, user_id: int) -> User | None:
        return await self.user_repo.get_by_id(user_id)

    async def add_session(self, user_id: int, session_id: str) -> None:
        await self.user_repo.add_session(user_id, session_id)

    async def remove_session(self, user_id: int, session_id: str) -> None:
        """Idempotent: removing an unknown session succeeds silently."""
        await self.user_repo.remove_session(user_id, session_id)

    async def clear_sessions(self, user_id: int) -> int:
        return await self.user_repo.clear_sessions(user_id)

    async def has_active_session(self, user_id: int, session_id: str) -> bool:
        return await self.user_repo.has_active_session(user_id, session_id)

    async def update_profile(self, user: User, changes: dict[str, Any]) -> User:
        """Apply an allow-listed partial update of name, email and/or password."""
        if not set(changes) <= ALLOWED_USER_UPDATES:
            raise ValidationError("Invalid Update")
        data = validate_input(UserUpdate, changes)
        for field in data.model_fields_set:
            if getattr(data, field) is None:
                raise ValidationError(f"{field}: may not be null")

        if "email" in data.model_fields_set and data.email != user.email:
            if await self.user_repo.get_by_email(data.email):
                raise ConflictError()
            user.email = data.email
        if "name" in data.model_fields_set:
            user.name = data.name
        if "password" in data.model_fields_set:
            user.hashed_password = hash_password(data.password)
        try:
            return await self.user_repo.save(user)
        except IntegrityError as exc:
            raise ConflictError() from exc

    async def delete(self, user: User) -> None:
        """
        Delete the account as one logical operation: sessions, owned todos, then the user.
        Runs inside the request transaction, so a failure part-way rolls everything back.
        """
        sessions = await self.user_repo.clear_sessions(user.id)
        todos = await self.todo_repo.delete_many(owner_id=user.id)
        await self.user_repo.delete_one(id=user.id)
        logger.info("Deleted user id=%s (sessions=%s, todos=%s)", user.id, sessions, todos)

    async def set_avatar(self, user: User, data: bytes, content_type: str | None) -> None:
        """Store a PNG or JPEG. The declared type must be an image and the bytes must agree."""
        declared = (content_type or "").split(";")[0].strip().lower()
        if declared not in AVATAR_CONTENT_TYPES or not data:
            raise ValidationError("Please upload an image")
        if len(data) > settings.avatar_max_bytes:
            raise ValidationError("Please upload an image")
        media_type = sniff_image_type(data)
        if media_type is None:
            raise ValidationError("Please upload an image")
        user.avatar = data
        user.avatar_content_type = media_type
        await self.user_repo.save(user)

    async def clear_avatar(self, user: User) -> None:
        user.avatar = None
        user.avatar_content_type = None
        await self.user_repo.save(user)

    async def get_avatar(self, user_id: int) -> tuple[bytes, str]:
        user = await self.user_repo.get_with_avatar(user_id)
        if user is None or not user.avatar:
            raise NotFoundError()
        return user.avatar, user.avatar_content_type or "image/png"
