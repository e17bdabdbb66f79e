"""Fixtures for the SQLAlchemy store tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqla_models import Base
from sqlalchemy.pool import StaticPool

from repokit_persistence_sqlalchemy import SQLAlchemyStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@pytest.fixture
async def store() -> AsyncIterator[SQLAlchemyStore]:
    """A store over a fresh in-memory SQLite database."""
    store = SQLAlchemyStore.from_url(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    assert store.engine is not None
    async with store.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield store
    await store.dispose()
