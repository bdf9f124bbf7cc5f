"""In-memory fakes for service-level unit tests."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

import pytest

from crud_template.application.interfaces import ExampleRepository
from crud_template.domain.entities import Example
from crud_template.domain.exceptions import MalformedArgumentError
from crud_template.domain.pagination import PaginationResult
from crud_template.domain.query_options import QueryOptions
from crud_template.domain.requests import ExampleSearchRequest, PaginationOrderRequest
from crud_template.infrastructure.database.retry import RetryStrategy


@dataclass
class FakeQuery:
    predicate: Callable[[Example], bool]


class FakeExampleRepository(ExampleRepository):
    """In-memory fake repository; stores copies so callers cannot mutate rows."""

    def __init__(self):
        self.rows: dict[int, Example] = {}
        self.calls: list[str] = []
        self._next_id = 1

    async def add(self, entity: Example) -> Example:
        self.calls.append("add")
        entity.id = self._next_id
        self._next_id += 1
        self.rows[entity.id] = replace(entity)
        return entity

    async def add_range(self, entities: Sequence[Example]) -> list[Example]:
        if not entities:
            raise MalformedArgumentError("empty batch")
        return [await self.add(entity) for entity in entities]

    async def update(self, entity: Example) -> Example:
        self.calls.append("update")
        self.rows[entity.id] = replace(entity)
        return entity

    async def delete(self, entity: Example) -> None:
        raise AssertionError("services soft-delete through update")

    async def get(self, entity_id: int, check_deleted_at: bool = True) -> Example | None:
        row = self.rows.get(entity_id)
        if row is None or (check_deleted_at and row.is_deleted):
            return None
        return replace(row)

    async def get_with_branch(self, entity_id: int, branch_id: int) -> Example | None:
        return None

    async def get_by_id_with_relations(self, entity_id: int) -> Example | None:
        row = self.rows.get(entity_id)
        return replace(row) if row is not None else None

    async def get_last(self, field: str = "created_at") -> Example | None:
        return None

    def all(self, options: QueryOptions) -> FakeQuery:
        return FakeQuery(lambda row: options.include_deleted or not row.is_deleted)

    def find(self, predicate, read_only: bool = False) -> FakeQuery:
        return FakeQuery(predicate)

    def search(self, request: ExampleSearchRequest) -> FakeQuery:
        return FakeQuery(
            lambda row: not row.is_deleted
            and request.name.lower() in row.name.lower()
            and request.description.lower() in row.description.lower()
        )

    async def name_exists(self, name: str, exclude_id: int | None = None) -> bool:
        return any(
            row.name.lower() == name.strip().lower() and row.id != exclude_id
            for row in self.rows.values()
            if not row.is_deleted
        )

    async def fetch(self, query: FakeQuery) -> list[Example]:
        return [replace(row) for row in self.rows.values() if query.predicate(row)]

    async def exists(self, query: FakeQuery) -> bool:
        return bool(await self.fetch(query))

    async def count(self, query: FakeQuery) -> int:
        return len(await self.fetch(query))

    async def apply_pagination_and_ordering(
        self, query: FakeQuery, request: PaginationOrderRequest
    ) -> PaginationResult[Example]:
        rows = sorted(
            await self.fetch(query),
            key=lambda row: row.id,
            reverse=request.direction.lower() == "desc",
        )
        return PaginationResult(
            data=rows[request.offset : request.offset + request.page_size],
            current_page=request.page_number,
            page_size=request.page_size,
            total_count=len(rows),
        )

    async def begin_transaction(self) -> None:
        pass

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass

    def get_retry_strategy(self) -> RetryStrategy:
        return RetryStrategy()


@pytest.fixture
def repository() -> FakeExampleRepository:
    return FakeExampleRepository()
