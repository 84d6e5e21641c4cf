"""Test fixtures with in-memory SQLite via SQLModel."""

from __future__ import annotations

import re

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from notepress.config import settings
from notepress.database import get_db_session
from notepress.db_models import Admin, Post  # noqa: F401
from notepress.main import app
from notepress.rate_limit import limiter

ADMIN_PASSWORD = "hunter22"


@pytest.fixture(autouse=True)
def session_secret():
    original = settings.session_secret
    settings.session_secret = "test-session-secret"
    yield settings.session_secret
    settings.session_secret = original


@pytest.fixture(autouse=True)
def reset_limiter():
    limiter.reset()
    yield


@pytest.fixture
async def db():
    engine = create_async_engine(
        "sqlite+aiosqlite://", echo=False, connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)  # type: ignore[call-overload]

    async def override_get_db_session():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session

    yield factory

    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture
async def client(db):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def admin_client(client):
    """Client with the admin password set and a live session cookie."""
    resp = await client.post("/api/auth/setup", json={"password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client


def sample_post(**overrides) -> dict:
    post = {
        "title": "Sum of divisors",
        "description": "A multiplicative function",
        "content": "# Idea\n\n$\\sigma(n) = \\sum_{d|n} d$",
        "category": "math",
        "tags": ["number-theory"],
        "difficulty": "medium",
    }
    post.update(overrides)
    return post


async def create_post(client: AsyncClient, **overrides) -> dict:
    """Helper: create a post through the API, return its JSON."""
    resp = await client.post("/api/posts", json=sample_post(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()


def csrf_from(page: str) -> str:
    m = re.search(r'name="csrf" value="([0-9a-f]+)"', page)
    assert m, "no csrf token in page"
    return m.group(1)
