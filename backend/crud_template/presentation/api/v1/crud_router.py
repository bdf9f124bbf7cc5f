"""Generic REST binding for one CRUD resource.

Every resource exposes the same six routes; the service behind them is
resolved per request through a FastAPI dependency.
"""

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from crud_template.application.schemas import PaginationResponse
from crud_template.application.services import CrudService
from crud_template.domain.requests import (
    DEFAULT_PAGE_SIZE,
    MIN_PAGE_NUMBER,
    PaginationOrderRequest,
)


def pagination_order_request(
    page_number: int = Query(MIN_PAGE_NUMBER, alias="PageNumber"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="PageSize"),
    sort_by: str | None = Query(None, alias="SortBy"),
    direction: str | None = Query(None, alias="Direction"),
) -> PaginationOrderRequest:
    """Paging/ordering query parameters; out-of-range values are clamped."""
    return PaginationOrderRequest(page_number, page_size, sort_by, direction)


def build_crud_router(
    *,
    prefix: str,
    tags: list[str],
    get_service: Callable[..., Any],
    response_schema: type[BaseModel],
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    list_request: Callable[..., PaginationOrderRequest] = pagination_order_request,
) -> APIRouter:
    """Build list/get/create/update/delete/activate routes for one resource."""
    router = APIRouter(prefix=prefix, tags=tags)
    page_schema = PaginationResponse[response_schema]  # type: ignore[valid-type]

    @router.get("", response_model=page_schema)
    async def list_records(
        request: PaginationOrderRequest = Depends(list_request),
        service: CrudService = Depends(get_service),
    ):
        """Retrieve one page of active records."""
        page = await service.get_all(request)
        return page_schema.from_result(page)

    @router.get("/{entity_id}", response_model=response_schema)
    async def get_record(
        entity_id: int,
        service: CrudService = Depends(get_service),
    ):
        """Retrieve a single record by ID."""
        return await service.get_by_id(entity_id)

    @router.post("", response_model=response_schema, status_code=status.HTTP_201_CREATED)
    async def create_record(
        data: create_schema,  # type: ignore[valid-type]
        service: CrudService = Depends(get_service),
    ):
        """Create a new record."""
        return await service.create(data)

    @router.put("", response_model=response_schema)
    async def update_record(
        data: update_schema,  # type: ignore[valid-type]
        service: CrudService = Depends(get_service),
    ):
        """Overwrite an existing record; the ID travels in the body."""
        return await service.update(data)

    @router.delete("/{entity_id}", status_code=status.HTTP_200_OK)
    async def delete_record(
        entity_id: int,
        service: CrudService = Depends(get_service),
    ) -> None:
        """Soft-delete a record."""
        await service.delete(entity_id)

    @router.patch("/{entity_id}", status_code=status.HTTP_200_OK)
    async def activate_record(
        entity_id: int,
        service: CrudService = Depends(get_service),
    ) -> None:
        """Reactivate a soft-deleted record."""
        await service.activate(entity_id)

    return router
