"""Outbound page of results."""

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass
class PaginationResult(Generic[T]):
    """One page of an ordered result set plus the totals needed to navigate it."""

    data: list[T]
    current_page: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    def map(self, fn: Callable[[T], U]) -> "PaginationResult[U]":
        """Project the page data into another shape, keeping the totals."""
        return PaginationResult(
            data=[fn(item) for item in self.data],
            current_page=self.current_page,
            page_size=self.page_size,
            total_count=self.total_count,
        )
