"""Example CRUD endpoints."""

from fastapi import Query

from crud_template.application.schemas import ExampleCreate, ExampleResponse, ExampleUpdate
from crud_template.domain.requests import (
    DEFAULT_PAGE_SIZE,
    MIN_PAGE_NUMBER,
    ExampleSearchRequest,
)
from crud_template.infrastructure.dependencies import get_example_service
from crud_template.presentation.api.v1.crud_router import build_crud_router


def example_search_request(
    page_number: int = Query(MIN_PAGE_NUMBER, alias="PageNumber"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="PageSize"),
    sort_by: str | None = Query(None, alias="SortBy"),
    direction: str | None = Query(None, alias="Direction"),
    name: str = Query("", alias="Name"),
    description: str = Query("", alias="Description"),
) -> ExampleSearchRequest:
    return ExampleSearchRequest(
        page_number,
        page_size,
        sort_by,
        direction,
        name=name,
        description=description,
    )


router = build_crud_router(
    prefix="/examples",
    tags=["Examples"],
    get_service=get_example_service,
    response_schema=ExampleResponse,
    create_schema=ExampleCreate,
    update_schema=ExampleUpdate,
    list_request=example_search_request,
)
