"""
Shared pytest fixtures for integration tests.

Integration tests run projections against a real SQLite database through
SQLAlchemy's async engine and aiosqlite. If aiosqlite is not installed, the
tests are skipped.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import pytest_asyncio

from tests.fixtures.schema import message_stats_table, metadata

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for integration tests."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


# ============================================================================
# SQLite Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Provide an async SQLite engine with the read model schema created.

    Uses a file database so every connection sees the same data.
    """
    pytest.importorskip("aiosqlite")
    from sqlalchemy.ext.asyncio import create_async_engine

    db_path = tmp_path / "read_model.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        await conn.execute(message_stats_table.insert().values(name="messages", total=0))

    yield engine

    await engine.dispose()
