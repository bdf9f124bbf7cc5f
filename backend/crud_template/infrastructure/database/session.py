"""SQLAlchemy database session and engine configuration."""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from crud_template.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def build_engine(
    settings: Settings, url: str | None = None, *, echo: bool | None = None
) -> AsyncEngine:
    """Async engine for the configured store (or ``url`` when given).

    Tables are declared in ``settings.db_schema``. SQLite has no schemas, so
    there the schema is translated away and in-memory databases share one
    connection.
    """
    async_url = _get_async_url(url or settings.sqlalchemy_url)
    options: dict[str, Any] = {}
    if async_url.startswith("sqlite"):
        options["execution_options"] = {"schema_translate_map": {settings.db_schema: None}}
        if ":memory:" in async_url:
            options["poolclass"] = StaticPool
            options["connect_args"] = {"check_same_thread": False}

    return create_async_engine(
        async_url,
        echo=(settings.app_env == "development") if echo is None else echo,
        pool_pre_ping=True,
        **options,
    )


settings = get_settings()
engine = build_engine(settings)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed when the request succeeds."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.debug("Rolling back the request session")
            await session.rollback()
            raise
