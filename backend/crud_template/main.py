"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from urllib.parse import urlparse

import asyncpg
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.schema import CreateSchema

from crud_template.config import get_settings
from crud_template.domain.clock import CivilClock, set_clock
from crud_template.infrastructure.database import Base, engine
from crud_template.infrastructure.database.retry import build_retry_strategy
from crud_template.infrastructure.logging.log_config import setup_logging
from crud_template.presentation.api.router import router as api_router
from crud_template.presentation.middlewares.error_handler import register_error_handling

logger = logging.getLogger(__name__)


async def _ensure_database_exists() -> None:
    """Create the PostgreSQL database if it does not yet exist.

    Connects to the default ``postgres`` maintenance database, checks for the
    target database name, and issues ``CREATE DATABASE`` when missing.
    """
    settings = get_settings()
    url = settings.sqlalchemy_url
    if not url.startswith("postgresql"):
        return

    parsed = urlparse(url)
    db_name = parsed.path.lstrip("/")
    if not db_name:
        return

    # asyncpg only understands the plain postgresql:// scheme
    maintenance_url = parsed._replace(scheme="postgresql", path="/postgres").geturl()

    try:
        conn = await asyncpg.connect(maintenance_url)
        try:
            exists = await conn.fetchval(
                "SELECT 1 FROM pg_database WHERE datname = $1", db_name
            )
            if not exists:
                # CREATE DATABASE cannot run inside a transaction block
                await conn.execute(f'CREATE DATABASE "{db_name}"')
                logger.info("Created database '%s'", db_name)
            else:
                logger.debug("Database '%s' already exists", db_name)
        finally:
            await conn.close()
    except (OSError, asyncpg.PostgresError) as exc:
        logger.warning("Could not auto-create database '%s': %s", db_name, exc)


async def _create_schema_and_tables() -> None:
    settings = get_settings()
    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.execute(CreateSchema(settings.db_schema, if_not_exists=True))
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema '%s' is ready", settings.db_schema)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: make sure the database, schema and tables exist."""
    setup_logging()

    await _ensure_database_exists()
    await build_retry_strategy().execute(_create_schema_and_tables)

    yield

    await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()
    set_clock(CivilClock(settings.timezone))

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Error translation sits inside CORS so error responses keep CORS headers
    register_error_handling(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "crud_template.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
