"""Concrete repository implementation for Example backed by SQLAlchemy."""

from sqlalchemy import Select, func

from crud_template.application.interfaces import ExampleRepository
from crud_template.domain.entities import Example
from crud_template.domain.query_options import QueryOptions
from crud_template.domain.requests import ExampleSearchRequest
from crud_template.infrastructure.database.models import ExampleModel
from crud_template.infrastructure.database.repositories.base_repository import (
    SQLAlchemyBaseRepository,
)


class SQLAlchemyExampleRepository(
    SQLAlchemyBaseRepository[Example, ExampleModel], ExampleRepository
):
    """Implements the ExampleRepository port using SQLAlchemy async sessions."""

    model = ExampleModel

    def _to_entity(self, model: ExampleModel) -> Example:
        return Example(
            id=model.id,
            name=model.name,
            description=model.description,
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at,
        )

    def _to_model(self, entity: Example) -> ExampleModel:
        return ExampleModel(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            deleted_at=entity.deleted_at,
        )

    def search(self, request: ExampleSearchRequest) -> Select:
        options = QueryOptions()
        name = request.name.strip()
        description = request.description.strip()
        if name:
            options = options.filter(ExampleModel.name.ilike(f"%{name}%"))
        if description:
            options = options.filter(ExampleModel.description.ilike(f"%{description}%"))
        return self.all(options)

    async def name_exists(self, name: str, exclude_id: int | None = None) -> bool:
        options = QueryOptions().filter(
            func.lower(ExampleModel.name) == name.strip().lower()
        )
        if exclude_id is not None:
            options = options.filter(ExampleModel.id != exclude_id)
        return await self.exists(self.all(options))
