"""Generic CRUD orchestration with soft delete and reactivation.

``CrudService`` sequences a fixed call chain for every verb and calls the
injected ``CrudHooks`` around the persistence step. Hooks are no-ops unless
a concrete entity supplies its own strategy.
"""

import logging
from typing import Any, Generic, TypeVar

from crud_template.application.interfaces import BaseRepository, EntityMapper
from crud_template.domain.clock import Clock, get_clock
from crud_template.domain.entities import BaseEntity
from crud_template.domain.exceptions import EntityNotFoundError, InvalidOperationError
from crud_template.domain.pagination import PaginationResult
from crud_template.domain.query_options import QueryOptions
from crud_template.domain.requests import PaginationOrderRequest

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseEntity)
DtoT = TypeVar("DtoT")
CreateT = TypeVar("CreateT")
UpdateT = TypeVar("UpdateT")


class CrudHooks(Generic[EntityT, CreateT, UpdateT]):
    """Extension points around each CRUD verb; every hook does nothing by default.

    ``before_*`` hooks may raise to abort the operation before anything is
    written. ``after_*`` hooks run once the write is persisted; raising there
    does not undo it.
    """

    async def after_get(self, entity: EntityT) -> None:
        pass

    async def before_create(self, data: CreateT) -> None:
        pass

    async def after_create(self, entity: EntityT) -> None:
        pass

    async def before_update(self, data: UpdateT, entity: EntityT) -> None:
        pass

    async def after_update(self, entity: EntityT) -> None:
        pass

    async def before_delete(self, entity: EntityT) -> None:
        pass

    async def after_delete(self, entity: EntityT) -> None:
        pass

    async def before_activate(self, entity: EntityT) -> None:
        pass

    async def after_activate(self, entity: EntityT) -> None:
        pass


class CrudService(Generic[EntityT, DtoT, CreateT, UpdateT]):
    """Orchestrates repository, mapper and hooks for one entity type."""

    def __init__(
        self,
        repository: BaseRepository[EntityT],
        mapper: EntityMapper[EntityT, DtoT, CreateT, UpdateT],
        *,
        entity_name: str,
        hooks: CrudHooks[EntityT, CreateT, UpdateT] | None = None,
        clock: Clock | None = None,
    ):
        self._repository = repository
        self._mapper = mapper
        self._entity_name = entity_name
        self._hooks = hooks or CrudHooks()
        self._clock = clock or get_clock()

    @property
    def entity_name(self) -> str:
        return self._entity_name

    # ── Reads ────────────────────────────────────────────────────────

    def _list_query(self, request: PaginationOrderRequest) -> Any:
        """Query behind ``get_all``; entity services may add request filters."""
        return self._repository.all(QueryOptions())

    async def get_all(self, request: PaginationOrderRequest) -> PaginationResult[DtoT]:
        query = self._list_query(request)
        page = await self._repository.apply_pagination_and_ordering(query, request)
        return page.map(self._mapper.to_dto)

    async def get_by_id(self, entity_id: int) -> DtoT:
        entity = await self._repository.get_by_id_with_relations(entity_id)
        if entity is None:
            raise EntityNotFoundError(self._entity_name, entity_id)

        await self._hooks.after_get(entity)
        return self._mapper.to_dto(entity)

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, data: CreateT) -> DtoT:
        await self._hooks.before_create(data)
        entity = self._mapper.to_entity(data)
        entity.created_at = entity.updated_at = self._clock.now()
        entity = await self._repository.add(entity)
        logger.info("Created %s %s", self._entity_name, entity.id)

        await self._hooks.after_create(entity)
        return self._mapper.to_dto(entity)

    async def update(self, data: UpdateT) -> DtoT:
        entity_id = getattr(data, "id", None)
        if entity_id is None:
            raise InvalidOperationError(
                f"Update payload for {self._entity_name} must carry an 'id' field."
            )

        entity = await self._get_or_raise(entity_id)
        await self._hooks.before_update(data, entity)

        self._mapper.merge(data, entity)
        entity.touch(self._clock.now())
        entity = await self._repository.update(entity)
        logger.info("Updated %s %s", self._entity_name, entity_id)

        await self._hooks.after_update(entity)
        return self._mapper.to_dto(entity)

    async def delete(self, entity_id: int) -> None:
        """Soft delete: the row stays and ``deleted_at`` is stamped."""
        entity = await self._get_or_raise(entity_id, check_deleted_at=False)
        await self._hooks.before_delete(entity)

        entity.mark_deleted(self._clock.now())
        await self._repository.update(entity)
        logger.info("Soft-deleted %s %s", self._entity_name, entity_id)

        await self._hooks.after_delete(entity)

    async def activate(self, entity_id: int) -> None:
        """Reactivate a soft-deleted record by clearing ``deleted_at``."""
        entity = await self._get_or_raise(entity_id, check_deleted_at=False)
        await self._hooks.before_activate(entity)

        entity.restore()
        await self._repository.update(entity)
        logger.info("Reactivated %s %s", self._entity_name, entity_id)

        await self._hooks.after_activate(entity)

    async def _get_or_raise(self, entity_id: int, check_deleted_at: bool = True) -> EntityT:
        entity = await self._repository.get(entity_id, check_deleted_at=check_deleted_at)
        if entity is None:
            raise EntityNotFoundError(self._entity_name, entity_id)
        return entity
