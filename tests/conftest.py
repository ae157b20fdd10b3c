"""
Pytest fixtures - test DB, client, auth (TDD/BDD support).
Challenge: Isolated tests; a fresh in-memory database per test.
"""

import os

# Must be set before todo_api is imported: settings are read once and cached
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "development"
os.environ["SECRET_KEY"] = "test-secret-key"

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from todo_api.db.base import Base
from todo_api.db.models import User
from todo_api.db.repositories import TodoRepository, UserRepository
from todo_api.db.session import get_db
from todo_api.main import app
from todo_api.services.credential_store import CredentialStore
from todo_api.services.session_manager import SessionManager

# One shared connection so every session sees the same in-memory database
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as s:
        yield s


@pytest_asyncio.fixture
async def client(session: AsyncSession):
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def credential_store(session: AsyncSession) -> CredentialStore:
    return CredentialStore(UserRepository(session), TodoRepository(session))


@pytest.fixture
def session_manager(credential_store: CredentialStore) -> SessionManager:
    return SessionManager(credential_store)


@pytest_asyncio.fixture
async def test_user(credential_store: CredentialStore) -> User:
    return await credential_store.create("Test User", "test@example.com", "password123")


@pytest_asyncio.fixture
async def auth_headers(test_user: User, session_manager: SessionManager) -> dict:
    token = await session_manager.issue(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client: AsyncClient):
    """Register through the API; returns (user_json, auth_headers)."""

    async def _register(name: str, email: str, password: str = "secret1"):
        response = await client.post("/users", json={"name": name, "email": email, "password": password})
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}

    return _register
