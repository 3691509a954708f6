"""
Jotter Backend — Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   API tests build a fresh app per test against a SQLite file in
       tmp_path (via aiosqlite) and talk to it through httpx's ASGITransport.
       Service tests use AsyncMock stores and sessions instead.

Fixture Hierarchy:
    test_settings ─▶ test_app ─▶ test_client
                         ├────▶ root_user ─▶ root_token / initial_notes
                         └────▶ notes_in_db / users_in_db (fresh-session reads)
    auth_service / mock_db_session (service unit tests)
"""

import os
from typing import AsyncGenerator, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Importing jotter.main builds the module-level app from the environment;
# point it at SQLite so no PostgreSQL driver or server is needed
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("SECRET", "test-secret-that-is-at-least-32-bytes-long")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("DB_CREATE_TABLES", "false")

from jotter.config import Settings  # noqa: E402
from jotter.main import create_app  # noqa: E402
from jotter.services.auth_service import AuthService  # noqa: E402
from jotter.stores.note_store import NoteStore  # noqa: E402
from jotter.stores.user_store import UserStore  # noqa: E402

TEST_SECRET = "test-secret-that-is-at-least-32-bytes-long"

INITIAL_NOTES = [
    {"content": "HTML is easy", "important": False},
    {"content": "Browser can execute only JavaScript", "important": True},
]


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings for one test: private SQLite file, fast bcrypt."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'jotter_test.db'}",
        secret=TEST_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
        _env_file=None,
    )


@pytest.fixture
def auth_service(test_settings) -> AuthService:
    return AuthService(test_settings)


@pytest_asyncio.fixture
async def test_app(test_settings):
    """
    A fresh application with empty tables.

    ASGITransport does not run the lifespan, so tables are created here and
    the engine is disposed on teardown.
    """
    app = create_app(test_settings)
    await app.state.database.create_all()
    yield app
    await app.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient wired straight to the app.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/notes")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def root_user(test_app, auth_service):
    """The user `root` (password `sekret`), committed before the test runs."""
    async with test_app.state.database.session_factory() as session:
        password_hash = await auth_service.hash_password("sekret")
        user = await UserStore(session).insert("root", "Superuser", password_hash)
        await session.commit()
    return user


@pytest.fixture
def root_token(root_user, auth_service) -> str:
    return auth_service.issue_token(root_user)


@pytest_asyncio.fixture
async def initial_notes(test_app, root_user):
    """INITIAL_NOTES stored under `root`, committed before the test runs."""
    async with test_app.state.database.session_factory() as session:
        users = UserStore(session)
        notes = NoteStore(session)
        user = await users.find_by_id(root_user.id)
        for data in INITIAL_NOTES:
            note = await notes.insert(data["content"], data["important"], user.id)
            await users.append_note(user, note.id)
        await session.commit()
    return INITIAL_NOTES


@pytest.fixture
def notes_in_db(test_app):
    """Async callable returning every stored note, read in a fresh session."""
    async def _notes_in_db() -> List:
        async with test_app.state.database.session_factory() as session:
            return await NoteStore(session).list_all()
    return _notes_in_db


@pytest.fixture
def users_in_db(test_app):
    """Async callable returning every stored user, read in a fresh session."""
    async def _users_in_db() -> List:
        async with test_app.state.database.session_factory() as session:
            return await UserStore(session).list_all()
    return _users_in_db


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Service tests patch the store classes, so this only needs to exist and
    record calls.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.get = AsyncMock()
    session.add = MagicMock()
    return session
