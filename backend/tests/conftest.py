"""Shared fixtures: an in-memory SQLite database and an API client bound to it."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.infrastructure.database import Database
from app.infrastructure.database.repositories import SQLAlchemyCRARepository
from app.main import create_app


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Fresh in-memory database with every table created."""
    db = Database("sqlite+aiosqlite://")
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture
def repository(database: Database) -> SQLAlchemyCRARepository:
    return SQLAlchemyCRARepository(database)


@pytest_asyncio.fixture
async def api_client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to an app wired to the test database."""
    app = create_app(database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
