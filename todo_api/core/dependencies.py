"""
FastAPI dependencies - injection for DB, services and the identity guard (SOLID: Dependency Inversion).
Challenge: One mandatory gate in front of every protected route, consistent 401s.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from todo_api.core.exceptions import AuthError
from todo_api.db.models.user import User
from todo_api.db.repositories.todo_repository import TodoRepository
from todo_api.db.repositories.user_repository import UserRepository
from todo_api.db.session import DbSession
from todo_api.services.credential_store import CredentialStore
from todo_api.services.session_manager import SessionManager
from todo_api.services.todo_service import TodoService

BEARER_SCHEME = "bearer"

# Parses the Authorization header and publishes the bearerAuth scheme in OpenAPI
security = HTTPBearer(auto_error=False, scheme_name="bearerAuth")


@dataclass
class Identity:
    """The authenticated caller: user record plus the session the request came in on."""

    user: User
    token: str
    session_id: str


def extract_bearer_token(authorization: str | None) -> str:
    """Pull the token out of "Bearer <token>". Anything else is unauthenticated."""
    if not authorization:
        raise AuthError()
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token or " " in token:
        raise AuthError()
    return token


class IdentityGuard:
    """Resolves an Authorization header to a live user, or fails closed."""

    def __init__(self, sessions: SessionManager, credentials: CredentialStore):
        self.sessions = sessions
        self.credentials = credentials

    async def resolve(self, authorization: str | None) -> Identity:
        return await self.resolve_token(extract_bearer_token(authorization))

    async def resolve_token(self, token: str) -> Identity:
        user_id, session_id = await self.sessions.authenticate(token)
        user = await self.credentials.get(user_id)
        if user is None:
            # Same answer as a bad token: account existence is not revealed
            raise AuthError()
        return Identity(user=user, token=token, session_id=session_id)


def get_credential_store(session: DbSession) -> CredentialStore:
    """Factory for the store with repository injection (Dependency Inversion)."""
    return CredentialStore(UserRepository(session), TodoRepository(session))


def get_session_manager(
    credentials: Annotated[CredentialStore, Depends(get_credential_store)],
) -> SessionManager:
    return SessionManager(credentials)


def get_todo_service(session: DbSession) -> TodoService:
    return TodoService(TodoRepository(session), UserRepository(session))


async def get_current_identity(
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
    credentials: Annotated[CredentialStore, Depends(get_credential_store)],
    bearer: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Identity:
    """Resolve the bearer token to an Identity. Raises AuthError (401) if anything is off."""
    token = bearer.credentials.strip() if bearer else ""
    if not token or " " in token:
        raise AuthError()
    guard = IdentityGuard(sessions, credentials)
    return await guard.resolve_token(token)


async def get_current_user(identity: Annotated[Identity, Depends(get_current_identity)]) -> User:
    return identity.user


Credentials = Annotated[CredentialStore, Depends(get_credential_store)]
Sessions = Annotated[SessionManager, Depends(get_session_manager)]
Todos = Annotated[TodoService, Depends(get_todo_service)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
CurrentUser = Annotated[User, Depends(get_current_user)]
