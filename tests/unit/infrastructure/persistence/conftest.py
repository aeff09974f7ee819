"""Shared fixtures for persistence tests."""

from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path

import pytest
from sqlmodel import SQLModel

from slackvault.infrastructure.persistence.database import Database
from slackvault.infrastructure.persistence.schema import create_schema

Seeder = Callable[..., Awaitable[None]]


@pytest.fixture
async def database(tmp_path: Path) -> AsyncIterator[Database]:
    """Create a test archive with tables and search index."""
    db_path = tmp_path / "archive.db"
    db = Database(f"sqlite+aiosqlite:///{db_path}")
    await db.initialize()
    await create_schema(db)
    yield db
    await db.close()


@pytest.fixture
def seed(database: Database) -> Seeder:
    """Insert rows into the test archive."""

    async def _seed(*rows: SQLModel) -> None:
        async with database.get_session() as session:
            session.add_all(rows)

    return _seed
