"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crud_template.application.services import ExampleService
from crud_template.domain.clock import get_clock
from crud_template.infrastructure.database.repositories import SQLAlchemyExampleRepository
from crud_template.infrastructure.database.retry import build_retry_strategy
from crud_template.infrastructure.database.session import get_db_session


async def get_example_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ExampleService, None]:
    """Provides an ExampleService instance with its repository wired up."""
    clock = get_clock()
    repository = SQLAlchemyExampleRepository(session, build_retry_strategy(), clock)
    yield ExampleService(repository, clock=clock)
