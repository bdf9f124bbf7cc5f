"""Generic repository port — the contract every entity repository fulfils.

Queries returned by ``all``/``find``/``search`` are opaque to the application
layer: they are built and consumed by the same repository implementation
(SQLAlchemy ``Select`` statements in the infrastructure layer).
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Generic, Protocol, TypeVar

from crud_template.domain.entities import BaseEntity
from crud_template.domain.pagination import PaginationResult
from crud_template.domain.query_options import QueryOptions
from crud_template.domain.requests import PaginationOrderRequest

EntityT = TypeVar("EntityT", bound=BaseEntity)
ResultT = TypeVar("ResultT")


class ExecutionStrategy(Protocol):
    """Retry policy for transient store failures."""

    async def execute(self, operation: Callable[[], Awaitable[ResultT]]) -> ResultT: ...


class BaseRepository(ABC, Generic[EntityT]):
    """Port for soft-delete aware persistence of one entity type."""

    # ── Writes ───────────────────────────────────────────────────────

    @abstractmethod
    async def add(self, entity: EntityT) -> EntityT:
        """Persist a new entity and return it with the generated ID."""
        ...

    @abstractmethod
    async def add_range(self, entities: Sequence[EntityT]) -> list[EntityT]:
        """Persist a non-empty batch; an empty batch is a caller bug."""
        ...

    @abstractmethod
    async def update(self, entity: EntityT) -> EntityT:
        """Overwrite every persisted field of an existing entity."""
        ...

    @abstractmethod
    async def delete(self, entity: EntityT) -> None:
        """Soft delete: stamp ``deleted_at`` and persist through ``update``."""
        ...

    # ── Lookups ──────────────────────────────────────────────────────

    @abstractmethod
    async def get(self, entity_id: int, check_deleted_at: bool = True) -> EntityT | None:
        """Point lookup; soft-deleted rows count as missing unless told otherwise."""
        ...

    @abstractmethod
    async def get_with_branch(self, entity_id: int, branch_id: int) -> EntityT | None:
        """Like ``get`` but also requires a matching ``branch_id``."""
        ...

    @abstractmethod
    async def get_by_id_with_relations(self, entity_id: int) -> EntityT | None:
        """Point lookup that concrete repositories may extend with eager loads."""
        ...

    @abstractmethod
    async def get_last(self, field: str = "created_at") -> EntityT | None:
        """Return the row with the greatest value of a date/time field."""
        ...

    # ── Query building ───────────────────────────────────────────────

    @abstractmethod
    def all(self, options: QueryOptions) -> Any:
        """Build a filtered, soft-delete aware, ordered query."""
        ...

    @abstractmethod
    def find(self, predicate: Any, read_only: bool = False) -> Any:
        """Build an ad hoc filtered query."""
        ...

    @abstractmethod
    async def fetch(self, query: Any) -> list[EntityT]:
        """Execute a query built by this repository."""
        ...

    @abstractmethod
    async def exists(self, query: Any) -> bool:
        ...

    @abstractmethod
    async def count(self, query: Any) -> int:
        ...

    @abstractmethod
    async def apply_pagination_and_ordering(
        self, query: Any, request: PaginationOrderRequest
    ) -> PaginationResult[EntityT]:
        """Order by the request's sort field, then return the requested page."""
        ...

    # ── Transactions ─────────────────────────────────────────────────

    @abstractmethod
    async def begin_transaction(self) -> None:
        ...

    @abstractmethod
    async def commit(self) -> None:
        """Flush pending writes and commit the explicit transaction, if any."""
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...

    @abstractmethod
    def get_retry_strategy(self) -> ExecutionStrategy:
        ...
