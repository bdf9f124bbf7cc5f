"""Shared fixtures: an in-memory SQLite database per test.

Tables are declared in the configured PostgreSQL schema; the engine
translates that schema away because SQLite has no schemas.
"""

from collections.abc import AsyncIterator
from datetime import datetime

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from crud_template.config import get_settings
from crud_template.domain.clock import get_clock, set_clock
from crud_template.infrastructure.database import Base
from crud_template.infrastructure.database.session import build_engine


class FixedClock:
    """Clock that returns a settable instant."""

    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current


@pytest.fixture
def fixed_clock() -> FixedClock:
    previous = get_clock()
    clock = FixedClock(datetime(2024, 5, 17, 9, 30))
    set_clock(clock)
    yield clock
    set_clock(previous)


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = build_engine(get_settings(), "sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session
