"""Application service (use case) for Example operations."""

from typing import Any

from crud_template.application.interfaces import EntityMapper, ExampleRepository
from crud_template.application.schemas import ExampleCreate, ExampleResponse, ExampleUpdate
from crud_template.application.services.base_service import CrudHooks, CrudService
from crud_template.domain.clock import Clock
from crud_template.domain.entities import Example
from crud_template.domain.exceptions import DuplicateEntityError, RecordStateError
from crud_template.domain.requests import ExampleSearchRequest, PaginationOrderRequest

ENTITY_NAME = "Example"


class ExampleMapper(EntityMapper[Example, ExampleResponse, ExampleCreate, ExampleUpdate]):
    """Maps Example entities to and from their API schemas."""

    def to_dto(self, entity: Example) -> ExampleResponse:
        return ExampleResponse.model_validate(entity, from_attributes=True)

    def to_entity(self, data: ExampleCreate) -> Example:
        return Example(name=data.name, description=data.description)

    def merge(self, data: ExampleUpdate, entity: Example) -> None:
        entity.name = data.name
        entity.description = data.description


class ExampleHooks(CrudHooks[Example, ExampleCreate, ExampleUpdate]):
    """Business rules for examples: unique names and one-way state transitions."""

    def __init__(self, repository: ExampleRepository):
        self._repository = repository

    async def before_create(self, data: ExampleCreate) -> None:
        await self._ensure_unique_name(data.name)

    async def before_update(self, data: ExampleUpdate, entity: Example) -> None:
        await self._ensure_unique_name(data.name, exclude_id=entity.id)

    async def before_delete(self, entity: Example) -> None:
        if entity.is_deleted:
            raise RecordStateError(ENTITY_NAME, entity.id, "Record is already inactive.")

    async def before_activate(self, entity: Example) -> None:
        if not entity.is_deleted:
            raise RecordStateError(ENTITY_NAME, entity.id, "Record is already active.")

    async def _ensure_unique_name(self, name: str, exclude_id: int | None = None) -> None:
        if await self._repository.name_exists(name, exclude_id=exclude_id):
            raise DuplicateEntityError(ENTITY_NAME, "name", name)


class ExampleService(CrudService[Example, ExampleResponse, ExampleCreate, ExampleUpdate]):
    """Generic CRUD for examples plus name/description search on listings."""

    def __init__(self, repository: ExampleRepository, clock: Clock | None = None):
        super().__init__(
            repository,
            ExampleMapper(),
            entity_name=ENTITY_NAME,
            hooks=ExampleHooks(repository),
            clock=clock,
        )
        self._examples = repository

    def _list_query(self, request: PaginationOrderRequest) -> Any:
        if isinstance(request, ExampleSearchRequest):
            return self._examples.search(request)
        return super()._list_query(request)
