"""
Notes API — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file (aiosqlite) with the full schema,
       and an app built by create_app() from explicit test Settings.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── test_settings:   Settings pointing at a tmp SQLite file, bcrypt cost 4
    ├── app:             create_app(test_settings) with tables created
    ├── test_client:     HTTPX AsyncClient over ASGITransport
    ├── db_session:      AsyncSession on the same database, rolled back at teardown
    ├── make_user:       inserts an account row and returns it
    ├── mock_user_repo / mock_note_repo: AsyncMock repositories (unit tests)
    └── register_and_login: helper that returns bearer headers for a new account

ASGITransport does not run the lifespan, so the schema is created here
instead of through DB_CREATE_SCHEMA.
"""

import os

# Override settings for testing BEFORE any notes_api imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test-default.db"
os.environ["JWT_SECRET"] = "test-secret-key-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Awaitable, Callable, Dict
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notes_api.config import Settings
from notes_api.main import create_app
from notes_api.models import User
from notes_api.repositories.base import NoteRepository, UserRepository

TEST_SECRET = "test-secret-key-not-for-production"
TEST_PASSWORD = "correct-horse"


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings for one test: private SQLite file, fast bcrypt."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
        cors_origins="http://localhost:3000",
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """FastAPI app with its schema created and engine disposed afterwards."""
    application = create_app(test_settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def db_session(app):
    """
    Session on the test database for service/repository tests.

    Rolled back at teardown, so tests that provoke a failed flush do not
    error on the way out.
    """
    async with app.state.database.session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def make_user(db_session) -> Callable[..., Awaitable[User]]:
    """
    Insert an account directly (no hashing) so note tests have a valid author.

    Usage:
        owner = await make_user("owner@example.com")
    """

    async def _make_user(email: str = None, name: str = "Test User") -> User:
        user = User(
            email=email or f"user-{uuid4().hex[:8]}@example.com",
            name=name,
            password_hash="not-a-real-hash",
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return _make_user


@pytest.fixture
def register_and_login(test_client) -> Callable[..., Awaitable[Dict[str, str]]]:
    """
    Register an account through the API and return its Authorization header.

    Usage:
        headers = await register_and_login("ann@example.com")
        await test_client.get("/notes/get-notes", headers=headers)
    """

    async def _register_and_login(email: str, password: str = TEST_PASSWORD, name: str = "Test") -> Dict[str, str]:
        response = await test_client.post(
            "/auth/register",
            json={"email": email, "name": name, "password": password},
        )
        assert response.status_code == 201, response.text
        response = await test_client.post(
            "/auth/login",
            json={"email": email, "password": password},
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register_and_login


# ══════════════════════════════════════════════════════════════════════════
# Repository Doubles
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_user_repo():
    """AsyncMock honoring the UserRepository contract."""
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def mock_note_repo():
    """AsyncMock honoring the NoteRepository contract."""
    return AsyncMock(spec=NoteRepository)
