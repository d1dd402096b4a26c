"""Shared fixtures: in-memory database, ASGI client, and authenticated users."""

import os
from typing import AsyncGenerator

# Configure the app for tests BEFORE importing it
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["REDIS_URL"] = "redis://localhost:1/0"

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from captains_log.database import Base, get_db
from captains_log.main import app
import captains_log.models  # noqa: F401

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register_user(
    client: AsyncClient,
    email: str = "traveler@example.com",
    username: str = "traveler",
    timezone: str = "UTC",
) -> dict:
    """Register a user and return its bearer headers plus the auth payload."""
    resp = await client.post(
        "/api/auth/register",
        json={"email": email, "username": username, "password": "s3cret-pass", "timezone": timezone},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return {"headers": {"Authorization": f"Bearer {body['token']}"}, "user": body["user"]}


@pytest_asyncio.fixture
async def auth(client) -> dict:
    return await register_user(client)


@pytest_asyncio.fixture
async def headers(auth) -> dict:
    return auth["headers"]


@pytest_asyncio.fixture
async def other_headers(client) -> dict:
    other = await register_user(client, email="stranger@example.com", username="stranger")
    return other["headers"]


@pytest_asyncio.fixture
async def trip(client, headers) -> dict:
    resp = await client.post(
        "/api/trips",
        json={
            "title": "Paris in Spring",
            "start_date": "2030-04-10",
            "end_date": "2030-04-15",
            "timezone": "Europe/Paris",
            "budget": 2000,
            "currency": "EUR",
        },
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
