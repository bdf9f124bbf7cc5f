"""Generic SQLAlchemy implementation of the BaseRepository port.

Concrete repositories set ``model`` and implement ``_to_entity``/``_to_model``;
everything else (soft-delete filtering, dynamic ordering, paging, explicit
transactions) is shared.
"""

from abc import abstractmethod
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from pydantic.alias_generators import to_snake
from sqlalchemy import Date, DateTime, Select, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from crud_template.application.interfaces import BaseRepository, ExecutionStrategy
from crud_template.application.interfaces.base_repository import EntityT
from crud_template.domain.clock import Clock, get_clock
from crud_template.domain.exceptions import (
    InvalidOperationError,
    MalformedArgumentError,
    MissingFieldError,
    SchemaMismatchError,
)
from crud_template.domain.pagination import PaginationResult
from crud_template.domain.query_options import QueryOptions
from crud_template.domain.requests import DEFAULT_SORT_BY, PaginationOrderRequest
from crud_template.infrastructure.database.retry import build_retry_strategy

ModelT = TypeVar("ModelT")

DELETED_AT = "deleted_at"
ACTIVE = "active"
BRANCH_ID = "branch_id"

# Marks statements whose results must not stay attached to the session.
READ_ONLY_OPTION = "crud_template_read_only"


class SQLAlchemyBaseRepository(BaseRepository[EntityT], Generic[EntityT, ModelT]):
    """Implements the BaseRepository port on top of an ``AsyncSession``."""

    model: type[Any]
    # Normalised (snake_case, dot separated) sort paths; None allows any column.
    sortable_fields: frozenset[str] | None = None

    def __init__(
        self,
        session: AsyncSession,
        retry_strategy: ExecutionStrategy | None = None,
        clock: Clock | None = None,
    ):
        self._session = session
        self._retry_strategy = retry_strategy
        self._clock = clock or get_clock()
        self._explicit_transaction = False

    @abstractmethod
    def _to_entity(self, model: ModelT) -> EntityT:
        """Map ORM model → domain entity."""
        ...

    @abstractmethod
    def _to_model(self, entity: EntityT) -> ModelT:
        """Map domain entity → ORM model."""
        ...

    @property
    def _entity_name(self) -> str:
        return self.model.__name__.removesuffix("Model")

    # ── Writes ───────────────────────────────────────────────────────

    async def add(self, entity: EntityT) -> EntityT:
        model = self._to_model(entity)
        self._session.add(model)
        await self._save_changes()
        entity.id = model.id
        return entity

    async def add_range(self, entities: Sequence[EntityT]) -> list[EntityT]:
        if not entities:
            raise MalformedArgumentError(
                f"Cannot add an empty collection of {self._entity_name} records."
            )
        models = [self._to_model(entity) for entity in entities]
        self._session.add_all(models)
        await self._save_changes()
        for entity, model in zip(entities, models):
            entity.id = model.id
        return list(entities)

    async def update(self, entity: EntityT) -> EntityT:
        if entity.id is None:
            raise InvalidOperationError(f"Cannot update an unsaved {self._entity_name}.")
        await self._session.merge(self._to_model(entity))
        await self._save_changes()
        return entity

    async def delete(self, entity: EntityT) -> None:
        entity.mark_deleted(self._clock.now())
        await self.update(entity)

    # ── Lookups ──────────────────────────────────────────────────────

    async def get(self, entity_id: int, check_deleted_at: bool = True) -> EntityT | None:
        model = await self._get_model(entity_id, check_deleted_at)
        return self._to_entity(model) if model is not None else None

    async def get_with_branch(self, entity_id: int, branch_id: int) -> EntityT | None:
        self._require_column(BRANCH_ID, MissingFieldError)
        model = await self._get_model(entity_id, check_deleted_at=True)
        if model is None or getattr(model, BRANCH_ID) != branch_id:
            return None
        return self._to_entity(model)

    async def get_by_id_with_relations(self, entity_id: int) -> EntityT | None:
        model = await self._session.get(self.model, entity_id)
        return self._to_entity(model) if model is not None else None

    async def get_last(self, field: str = "created_at") -> EntityT | None:
        stmt, column = self._resolve_column(select(self.model), field)
        if not isinstance(column.expression.type, (DateTime, Date)):
            raise InvalidOperationError(
                f"Field '{field}' of {self._entity_name} is not a date/time column."
            )
        stmt = stmt.where(column.is_not(None)).order_by(column.desc()).limit(1)
        rows = await self.fetch(stmt)
        return rows[0] if rows else None

    async def _get_model(self, entity_id: int, check_deleted_at: bool) -> ModelT | None:
        model = await self._session.get(self.model, entity_id)
        if model is None:
            return None
        if check_deleted_at and getattr(model, DELETED_AT, None) is not None:
            return None
        return model

    # ── Query building ───────────────────────────────────────────────

    def all(self, options: QueryOptions) -> Select:
        self._require_column(DELETED_AT)
        if options.only_actives:
            self._require_column(ACTIVE)

        stmt = select(self.model)
        if options.read_only:
            stmt = self._as_read_only(stmt)
        for clause in options.where:
            stmt = stmt.where(clause)
        if not options.include_deleted:
            stmt = stmt.where(getattr(self.model, DELETED_AT).is_(None))
        if options.only_actives:
            stmt = stmt.where(getattr(self.model, ACTIVE).is_(True))
        return self._apply_ordering(stmt, options.sort_by, options.direction)

    def find(self, predicate: Any, read_only: bool = False) -> Select:
        stmt = select(self.model).where(predicate)
        return self._as_read_only(stmt) if read_only else stmt

    async def fetch(self, query: Select) -> list[EntityT]:
        result = await self._session.execute(query)
        models = result.scalars().unique().all()
        entities = [self._to_entity(model) for model in models]
        if query.get_execution_options().get(READ_ONLY_OPTION):
            for model in models:
                self._session.expunge(model)
        return entities

    async def exists(self, query: Select) -> bool:
        return bool(await self._session.scalar(select(query.order_by(None).exists())))

    async def count(self, query: Select) -> int:
        stmt = select(func.count()).select_from(query.order_by(None).subquery())
        return (await self._session.execute(stmt)).scalar_one()

    async def apply_pagination_and_ordering(
        self, query: Select, request: PaginationOrderRequest
    ) -> PaginationResult[EntityT]:
        ordered = self._apply_ordering(query, request.sort_by, request.direction)
        total_count = await self.count(ordered)
        page = ordered.offset(request.offset).limit(request.page_size)
        data = await self.fetch(page)
        return PaginationResult(
            data=data,
            current_page=request.page_number,
            page_size=request.page_size,
            total_count=total_count,
        )

    def _apply_ordering(self, stmt: Select, sort_by: str | None, direction: str | None) -> Select:
        stmt, column = self._resolve_column(stmt, sort_by or DEFAULT_SORT_BY)
        descending = (direction or "").strip().lower() == "desc"
        return stmt.order_by(None).order_by(column.desc() if descending else column.asc())

    def _resolve_column(self, stmt: Select, path: str) -> tuple[Select, Any]:
        """Resolve a PascalCase/camelCase/snake_case (dot separated) field path.

        Intermediate segments are many-to-one relationships and are
        outer-joined through an alias, so a related row that is missing never
        drops the parent. Collections are rejected: joining them would repeat
        the parent once per child and break the page totals.
        """
        segments = [to_snake(part.strip()) for part in path.split(".") if part.strip()]
        if not segments:
            raise InvalidOperationError(f"Empty sort field for {self._entity_name}.")

        normalized = ".".join(segments)
        if self.sortable_fields is not None and normalized not in self.sortable_fields:
            raise InvalidOperationError(
                f"Sorting {self._entity_name} by '{path}' is not allowed."
            )

        target: Any = self.model
        for segment in segments[:-1]:
            mapper = inspect(target).mapper
            if segment not in mapper.relationships:
                raise SchemaMismatchError(mapper.class_.__name__, segment)
            if mapper.relationships[segment].uselist:
                raise InvalidOperationError(
                    f"Cannot sort {self._entity_name} through the collection '{segment}'."
                )
            related = aliased(mapper.relationships[segment].mapper.class_)
            stmt = stmt.outerjoin(related, getattr(target, segment).of_type(related))
            target = related

        mapper = inspect(target).mapper
        if segments[-1] not in mapper.column_attrs:
            raise SchemaMismatchError(mapper.class_.__name__, segments[-1])
        return stmt, getattr(target, segments[-1])

    def _require_column(
        self, name: str, error: type[SchemaMismatchError] = SchemaMismatchError
    ) -> None:
        if name not in inspect(self.model).column_attrs:
            raise error(self._entity_name, name)

    @staticmethod
    def _as_read_only(stmt: Select) -> Select:
        return stmt.execution_options(**{READ_ONLY_OPTION: True})

    # ── Transactions ─────────────────────────────────────────────────

    async def begin_transaction(self) -> None:
        if self._explicit_transaction:
            raise InvalidOperationError("A transaction is already in progress.")
        if not self._session.in_transaction():
            await self._session.begin()
        self._explicit_transaction = True

    async def commit(self) -> None:
        await self._session.flush()
        if self._explicit_transaction:
            await self._session.commit()
            self._explicit_transaction = False

    async def rollback(self) -> None:
        if self._explicit_transaction:
            await self._session.rollback()
            self._explicit_transaction = False

    def get_retry_strategy(self) -> ExecutionStrategy:
        if self._retry_strategy is None:
            self._retry_strategy = build_retry_strategy()
        return self._retry_strategy

    async def _save_changes(self) -> None:
        await self._session.flush()
        if not self._explicit_transaction:
            await self._session.commit()
