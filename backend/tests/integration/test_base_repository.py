"""Integration tests for SQLAlchemyBaseRepository on in-memory SQLite."""

from dataclasses import dataclass
from datetime import datetime

import pytest
import pytest_asyncio
from sqlalchemy import Boolean, ForeignKey, Integer, String, inspect, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from crud_template.domain.entities import BaseEntity
from crud_template.domain.exceptions import (
    InvalidOperationError,
    MalformedArgumentError,
    MissingFieldError,
    SchemaMismatchError,
)
from crud_template.domain.query_options import QueryOptions
from crud_template.domain.requests import PaginationOrderRequest
from crud_template.infrastructure.database.base import AuditMixin
from crud_template.infrastructure.database.repositories import SQLAlchemyBaseRepository
from crud_template.infrastructure.database.retry import RetryStrategy


class ScratchBase(DeclarativeBase):
    pass


class OwnerModel(ScratchBase):
    __tablename__ = "owners"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50))


class GadgetModel(AuditMixin, ScratchBase):
    __tablename__ = "gadgets"

    name: Mapped[str] = mapped_column(String(50))
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    branch_id: Mapped[int] = mapped_column(Integer, default=1)
    owner_id: Mapped[int | None] = mapped_column(ForeignKey("owners.id"), nullable=True)

    owner: Mapped[OwnerModel | None] = relationship()
    parts: Mapped[list["PartModel"]] = relationship()


class PartModel(ScratchBase):
    __tablename__ = "parts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    gadget_id: Mapped[int] = mapped_column(ForeignKey("gadgets.id"))
    name: Mapped[str] = mapped_column(String(50))


class PlainModel(ScratchBase):
    __tablename__ = "plain_rows"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50))


@dataclass(kw_only=True)
class Gadget(BaseEntity):
    name: str = ""
    active: bool = True
    branch_id: int = 1
    owner_id: int | None = None


class GadgetRepository(SQLAlchemyBaseRepository[Gadget, GadgetModel]):
    model = GadgetModel

    def _to_entity(self, model: GadgetModel) -> Gadget:
        return Gadget(
            id=model.id,
            name=model.name,
            active=model.active,
            branch_id=model.branch_id,
            owner_id=model.owner_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at,
        )

    def _to_model(self, entity: Gadget) -> GadgetModel:
        return GadgetModel(
            id=entity.id,
            name=entity.name,
            active=entity.active,
            branch_id=entity.branch_id,
            owner_id=entity.owner_id,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            deleted_at=entity.deleted_at,
        )


class WhitelistedGadgetRepository(GadgetRepository):
    sortable_fields = frozenset({"id", "name"})


class PlainRepository(SQLAlchemyBaseRepository[BaseEntity, PlainModel]):
    model = PlainModel

    def _to_entity(self, model: PlainModel) -> BaseEntity:
        return BaseEntity(id=model.id)

    def _to_model(self, entity: BaseEntity) -> PlainModel:
        return PlainModel(id=entity.id, name="plain")


@pytest_asyncio.fixture
async def repository(engine, session) -> GadgetRepository:
    async with engine.begin() as conn:
        await conn.run_sync(ScratchBase.metadata.create_all)
    return GadgetRepository(session)


async def _add_gadgets(repository: GadgetRepository, *names: str, **fields) -> list[Gadget]:
    return await repository.add_range([Gadget(name=name, **fields) for name in names])


# ── Writes ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_add_assigns_id_and_persists(repository, session_factory):
    gadget = await repository.add(Gadget(name="Lamp"))

    assert gadget.id is not None
    async with session_factory() as other_session:
        stored = await GadgetRepository(other_session).get(gadget.id)
    assert stored is not None
    assert stored.name == "Lamp"
    assert stored.updated_at == stored.created_at


@pytest.mark.asyncio
async def test_add_range_rejects_empty_batch(repository):
    with pytest.raises(MalformedArgumentError):
        await repository.add_range([])


@pytest.mark.asyncio
async def test_add_range_assigns_every_id(repository):
    gadgets = await _add_gadgets(repository, "A", "B", "C")
    assert len({gadget.id for gadget in gadgets}) == 3
    assert await repository.count(repository.all(QueryOptions())) == 3


@pytest.mark.asyncio
async def test_update_overwrites_the_row(repository, session_factory):
    gadget = await repository.add(Gadget(name="Lamp", branch_id=1))
    gadget.name = "Desk lamp"
    gadget.branch_id = 2

    await repository.update(gadget)

    async with session_factory() as other_session:
        stored = await GadgetRepository(other_session).get(gadget.id)
    assert (stored.name, stored.branch_id) == ("Desk lamp", 2)


@pytest.mark.asyncio
async def test_update_of_unsaved_entity_is_invalid(repository):
    with pytest.raises(InvalidOperationError):
        await repository.update(Gadget(name="Ghost"))


# ── Soft delete ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_soft_deleted_rows_are_hidden(fixed_clock, repository):
    kept, removed = await _add_gadgets(repository, "Kept", "Removed")

    await repository.delete(removed)

    assert removed.deleted_at == fixed_clock.now()
    assert await repository.get(removed.id) is None
    hidden = await repository.get(removed.id, check_deleted_at=False)
    assert hidden is not None and hidden.deleted_at == fixed_clock.now()
    assert await repository.get_by_id_with_relations(removed.id) is not None

    listed = await repository.fetch(repository.all(QueryOptions()))
    assert [gadget.id for gadget in listed] == [kept.id]

    everything = await repository.fetch(repository.all(QueryOptions(include_deleted=True)))
    assert {gadget.id for gadget in everything} == {kept.id, removed.id}


@pytest.mark.asyncio
async def test_only_actives_filters_on_active_flag(repository):
    await _add_gadgets(repository, "On")
    await _add_gadgets(repository, "Off", active=False)

    rows = await repository.fetch(repository.all(QueryOptions(only_actives=True)))
    assert [gadget.name for gadget in rows] == ["On"]


@pytest.mark.asyncio
async def test_all_requires_deleted_at_column(engine, session):
    async with engine.begin() as conn:
        await conn.run_sync(ScratchBase.metadata.create_all)
    with pytest.raises(SchemaMismatchError):
        PlainRepository(session).all(QueryOptions())


@pytest.mark.asyncio
async def test_where_clauses_are_combined(repository):
    await _add_gadgets(repository, "Lamp", "Lantern", "Desk")
    options = QueryOptions().filter(GadgetModel.name.like("L%"), GadgetModel.name != "Lamp")
    rows = await repository.fetch(repository.all(options))
    assert [gadget.name for gadget in rows] == ["Lantern"]


# ── Lookups ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_get_with_branch(repository):
    (gadget,) = await _add_gadgets(repository, "Lamp", branch_id=7)

    assert (await repository.get_with_branch(gadget.id, 7)).name == "Lamp"
    assert await repository.get_with_branch(gadget.id, 8) is None


@pytest.mark.asyncio
async def test_get_with_branch_requires_branch_column(engine, session):
    async with engine.begin() as conn:
        await conn.run_sync(ScratchBase.metadata.create_all)
    with pytest.raises(MissingFieldError):
        await PlainRepository(session).get_with_branch(1, 1)


@pytest.mark.asyncio
async def test_get_last_returns_latest_timestamp(repository):
    await repository.add(Gadget(name="Old", created_at=datetime(2023, 1, 1)))
    await repository.add(Gadget(name="New", created_at=datetime(2024, 6, 1)))
    await repository.add(Gadget(name="Mid", created_at=datetime(2023, 9, 1)))

    last = await repository.get_last()
    assert last.name == "New"
    assert (await repository.get_last("CreatedAt")).name == "New"


@pytest.mark.asyncio
async def test_get_last_rejects_non_temporal_field(repository):
    with pytest.raises(InvalidOperationError):
        await repository.get_last("Name")


@pytest.mark.asyncio
async def test_get_last_on_empty_table(repository):
    assert await repository.get_last() is None


# ── Paging and ordering ─────────────────────────────────────────────


@pytest.mark.asyncio
async def test_pagination_of_25_rows_in_pages_of_10(repository):
    await _add_gadgets(repository, *[f"G{index:02d}" for index in range(25)])
    query = repository.all(QueryOptions())

    first = await repository.apply_pagination_and_ordering(
        query, PaginationOrderRequest(0, 10, "Name", "asc")
    )
    last = await repository.apply_pagination_and_ordering(
        query, PaginationOrderRequest(2, 10, "Name", "asc")
    )

    assert [gadget.name for gadget in first.data] == [f"G{index:02d}" for index in range(10)]
    assert (first.total_count, first.total_pages, first.current_page) == (25, 3, 0)
    assert [gadget.name for gadget in last.data] == [f"G{index:02d}" for index in range(20, 25)]


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(repository):
    await _add_gadgets(repository, "A", "B")
    page = await repository.apply_pagination_and_ordering(
        repository.all(QueryOptions()), PaginationOrderRequest(5, 10)
    )
    assert page.data == []
    assert page.total_count == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("sort_by", "direction", "expected"),
    [
        ("Name", "asc", ["Apple", "Banana", "Cherry"]),
        ("name", "DESC", ["Cherry", "Banana", "Apple"]),
        ("Id", "desc", ["Banana", "Cherry", "Apple"]),
        ("id", "anything", ["Apple", "Cherry", "Banana"]),
    ],
)
async def test_ordering_by_field_name(repository, sort_by, direction, expected):
    await _add_gadgets(repository, "Apple", "Cherry", "Banana")
    page = await repository.apply_pagination_and_ordering(
        repository.all(QueryOptions()), PaginationOrderRequest(0, 10, sort_by, direction)
    )
    assert [gadget.name for gadget in page.data] == expected


@pytest.mark.asyncio
async def test_default_listing_is_newest_id_first(repository):
    await _add_gadgets(repository, "First", "Second")
    rows = await repository.fetch(repository.all(QueryOptions()))
    assert [gadget.name for gadget in rows] == ["Second", "First"]


@pytest.mark.asyncio
async def test_unknown_sort_field_is_invalid(repository):
    with pytest.raises(InvalidOperationError):
        await repository.apply_pagination_and_ordering(
            repository.all(QueryOptions()), PaginationOrderRequest(sort_by="Colour")
        )


@pytest.mark.asyncio
async def test_sort_whitelist(session, repository):
    whitelisted = WhitelistedGadgetRepository(session)
    query = whitelisted.all(QueryOptions())

    await whitelisted.apply_pagination_and_ordering(query, PaginationOrderRequest(sort_by="Name"))
    with pytest.raises(InvalidOperationError):
        await whitelisted.apply_pagination_and_ordering(
            query, PaginationOrderRequest(sort_by="BranchId")
        )


@pytest.mark.asyncio
async def test_ordering_through_relationship_keeps_rows_without_owner(repository, session):
    zed, amy = OwnerModel(name="Zed"), OwnerModel(name="Amy")
    session.add_all([zed, amy])
    await session.commit()
    await repository.add(Gadget(name="A", owner_id=zed.id))
    await repository.add(Gadget(name="B", owner_id=amy.id))
    await repository.add(Gadget(name="C"))

    page = await repository.apply_pagination_and_ordering(
        repository.all(QueryOptions()), PaginationOrderRequest(0, 10, "Owner.Name", "asc")
    )

    assert len(page.data) == 3
    assert page.total_count == 3
    assert [gadget.name for gadget in page.data if gadget.owner_id] == ["B", "A"]


@pytest.mark.asyncio
async def test_ordering_through_a_collection_is_rejected(repository, session):
    (gadget,) = await _add_gadgets(repository, "Lamp")
    session.add_all(
        [PartModel(gadget_id=gadget.id, name="Bulb"), PartModel(gadget_id=gadget.id, name="Shade")]
    )
    await session.commit()

    with pytest.raises(InvalidOperationError):
        await repository.apply_pagination_and_ordering(
            repository.all(QueryOptions()), PaginationOrderRequest(0, 10, "Parts.Name", "asc")
        )


class FrozenClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current


@pytest.mark.asyncio
async def test_delete_stamps_time_from_injected_clock(repository, session):
    clock = FrozenClock(datetime(2000, 1, 1, 12, 0))
    stamped = GadgetRepository(session, clock=clock)
    (gadget,) = await _add_gadgets(stamped, "Lamp")

    await stamped.delete(gadget)

    stored = await stamped.get(gadget.id, check_deleted_at=False)
    assert stored.deleted_at == datetime(2000, 1, 1, 12, 0)


# ── Query helpers ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_exists_and_count(repository):
    await _add_gadgets(repository, "Lamp", "Desk")

    assert await repository.exists(repository.find(GadgetModel.name == "Lamp"))
    assert not await repository.exists(repository.find(GadgetModel.name == "Chair"))
    assert await repository.count(repository.find(GadgetModel.name != "Chair")) == 2


@pytest.mark.asyncio
async def test_read_only_results_are_detached(repository, session):
    await _add_gadgets(repository, "Lamp", "Desk")
    held = (await session.execute(select(GadgetModel))).scalars().all()

    await repository.fetch(repository.all(QueryOptions()))
    assert len(held) == 2
    assert all(inspect(model).detached for model in held)

    tracked = (await session.execute(select(GadgetModel))).scalars().all()
    await repository.fetch(repository.find(GadgetModel.name == "Lamp"))
    assert all(inspect(model).persistent for model in tracked)


# ── Transactions ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_rollback_discards_writes(repository):
    await repository.begin_transaction()
    await _add_gadgets(repository, "Lamp")
    await repository.rollback()

    assert await repository.count(repository.all(QueryOptions())) == 0


@pytest.mark.asyncio
async def test_commit_persists_writes(repository, session_factory):
    await repository.begin_transaction()
    await _add_gadgets(repository, "Lamp", "Desk")
    await repository.commit()

    async with session_factory() as other_session:
        other = GadgetRepository(other_session)
        assert await other.count(other.all(QueryOptions())) == 2


@pytest.mark.asyncio
async def test_nested_begin_is_invalid(repository):
    await repository.begin_transaction()
    with pytest.raises(InvalidOperationError):
        await repository.begin_transaction()
    await repository.rollback()


@pytest.mark.asyncio
async def test_retry_strategy_is_injectable(session):
    strategy = RetryStrategy()
    assert GadgetRepository(session, strategy).get_retry_strategy() is strategy
    assert isinstance(GadgetRepository(session).get_retry_strategy(), RetryStrategy)
