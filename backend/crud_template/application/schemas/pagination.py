"""Pydantic DTO for paged listings."""

from typing import Generic, TypeVar

from crud_template.application.schemas.base import ApiSchema
from crud_template.domain.pagination import PaginationResult

ItemT = TypeVar("ItemT")


class PaginationResponse(ApiSchema, Generic[ItemT]):
    """Schema returned by every list endpoint."""

    data: list[ItemT]
    current_page: int
    total_pages: int
    page_size: int
    total_count: int

    @classmethod
    def from_result(cls, result: PaginationResult[ItemT]) -> "PaginationResponse[ItemT]":
        return cls(
            data=result.data,
            current_page=result.current_page,
            total_pages=result.total_pages,
            page_size=result.page_size,
            total_count=result.total_count,
        )
