"""Health check endpoint: reports the build and whether the database answers."""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from crud_template.config import get_settings
from crud_template.infrastructure.database.session import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    response: Response,
    session: AsyncSession = Depends(get_db_session),
) -> dict:
    """200 when the database answers ``SELECT 1``, 503 otherwise."""
    settings = get_settings()
    database = "up"
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Health check could not reach the database: %s", exc)
        await session.rollback()
        database = "down"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "healthy" if database == "up" else "degraded",
        "version": settings.app_version,
        "environment": settings.app_env,
        "database": database,
        "schema": settings.db_schema,
    }
