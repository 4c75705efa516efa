"""Async test fixtures for Realty CRM tests using SQLite."""

from __future__ import annotations

import time
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from realty_crm.auth.sessions import hash_password, issue_session_token
from realty_crm.config import settings
from realty_crm.database import get_db
from realty_crm.models.base import Base
from realty_crm.models.user import User, UserSettings
from realty_crm.services.google_calendar_svc import get_google_client
from realty_crm.google.client import GoogleCalendarClient
from realty_crm.storage.filestore import FileStore, get_filestore

TEST_PASSWORD = "secret123"


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def test_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "auth_enabled", True)
    monkeypatch.setattr(settings, "auth_secret", "test-secret")
    monkeypatch.setattr(settings, "google_client_id", "client-id")
    monkeypatch.setattr(settings, "google_client_secret", "client-secret")
    monkeypatch.setattr(settings, "storage_dir", str(tmp_path / "storage"))
    return settings


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


async def _make_user(db: AsyncSession, email: str, full_name: str) -> User:
    user = User(email=email, password_hash=hash_password(TEST_PASSWORD, iterations=1000), full_name=full_name)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def user(db: AsyncSession) -> User:
    return await _make_user(db, "agent@example.com", "Alex Agent")


@pytest_asyncio.fixture
async def other_user(db: AsyncSession) -> User:
    return await _make_user(db, "other@example.com", "Olive Other")


@pytest_asyncio.fixture
async def connected_user(db: AsyncSession, user: User) -> User:
    """User with a stored, unexpired Google token."""
    db.add(UserSettings(
        user_id=user.id,
        google_calendar_connected=True,
        google_calendar_token={
            "access_token": "stored-access",
            "refresh_token": "stored-refresh",
            "expires_at": int(time.time()) + 3600,
            "token_type": "Bearer",
        },
    ))
    await db.commit()
    return user


@pytest.fixture
def store(tmp_path) -> FileStore:
    return FileStore(tmp_path / "files", "/files")


@pytest.fixture
def google_client() -> GoogleCalendarClient:
    return GoogleCalendarClient.from_settings(settings)


def mock_http(*responses):
    """Patchable ``httpx.AsyncClient`` whose calls return *responses* in order."""
    instance = MagicMock()
    queue = list(responses)

    async def _next(*args, **kwargs):
        return queue.pop(0)

    instance.post = AsyncMock(side_effect=_next)
    instance.put = AsyncMock(side_effect=_next)
    instance.get = AsyncMock(side_effect=_next)
    instance.delete = AsyncMock(side_effect=_next)
    instance.__aenter__ = AsyncMock(return_value=instance)
    instance.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=instance), instance


def http_response(status_code: int = 200, payload: dict | None = None):
    response = MagicMock()
    response.status_code = status_code
    response.content = b"{}" if payload is not None else b""
    response.json.return_value = payload if payload is not None else {}
    response.text = str(payload or "")
    return response


@pytest_asyncio.fixture
async def client(engine, store, google_client):
    """HTTPX async test client against the app (no session cookie)."""
    from realty_crm.app import app

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_filestore] = lambda: store
    app.dependency_overrides[get_google_client] = lambda: google_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth_client(client: AsyncClient, user: User) -> AsyncClient:
    """The same client carrying a signed session for ``user``."""
    client.cookies.set(settings.auth_cookie_name, issue_session_token(settings, user.id, user.email))
    return client


@pytest.fixture
def http():
    """Helpers for faking Google over a patched ``httpx.AsyncClient``."""
    return SimpleNamespace(mock=mock_http, response=http_response)
