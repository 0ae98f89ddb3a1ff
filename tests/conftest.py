"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database, so nothing leaks between
tests. API tests talk to the FastAPI app through httpx with ``get_db``
overridden to point at that database.
"""
import os

os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("OPENAI_API_KEY", "")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pillarlog.core.config import settings
from pillarlog.db.init_db import create_all, drop_all
from pillarlog.db.models import User
from pillarlog.db.session import get_db
from pillarlog.main import app


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_all(engine)
    yield engine
    await drop_all(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def users(session_factory):
    """alice(1), bob(2), carol(3); only alice starts with a friend code."""
    async with session_factory() as session:
        rows = [
            User(id=1, username="alice", friend_code="ALICE1"),
            User(id=2, username="bob"),
            User(id=3, username="carol"),
        ]
        session.add_all(rows)
        await session.commit()
    return {"alice": 1, "bob": 2, "carol": 3}


def make_token(user_id: int) -> str:
    return jwt.encode({"sub": str(user_id)}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def auth(user_id: int) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest_asyncio.fixture
async def client(session_factory, users):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    return auth
