"""Inbound, client-controlled listing requests."""

MAX_PAGE_SIZE = 50
MIN_PAGE_SIZE = 1
MIN_PAGE_NUMBER = 0
DEFAULT_PAGE_SIZE = 10
DEFAULT_SORT_BY = "Id"
DEFAULT_DIRECTION = "desc"


class PaginationOrderRequest:
    """Paging and ordering parameters.

    Out-of-range values are clamped rather than rejected: page numbers below
    zero become 0 and page sizes above 50 become 50. Assigning ``None`` to
    ``sort_by`` or ``direction`` keeps the previous value.
    """

    def __init__(
        self,
        page_number: int = MIN_PAGE_NUMBER,
        page_size: int = DEFAULT_PAGE_SIZE,
        sort_by: str | None = None,
        direction: str | None = None,
        *,
        default_sort_by: str = DEFAULT_SORT_BY,
        default_direction: str = DEFAULT_DIRECTION,
    ):
        self._page_number = MIN_PAGE_NUMBER
        self._page_size = DEFAULT_PAGE_SIZE
        self._sort_by = default_sort_by
        self._direction = default_direction

        self.page_number = page_number
        self.page_size = page_size
        self.sort_by = sort_by
        self.direction = direction

    @property
    def page_number(self) -> int:
        return self._page_number

    @page_number.setter
    def page_number(self, value: int) -> None:
        self._page_number = max(value, MIN_PAGE_NUMBER)

    @property
    def page_size(self) -> int:
        return self._page_size

    @page_size.setter
    def page_size(self, value: int) -> None:
        self._page_size = min(max(value, MIN_PAGE_SIZE), MAX_PAGE_SIZE)

    @property
    def sort_by(self) -> str:
        return self._sort_by

    @sort_by.setter
    def sort_by(self, value: str | None) -> None:
        if value is not None:
            self._sort_by = value

    @property
    def direction(self) -> str:
        return self._direction

    @direction.setter
    def direction(self, value: str | None) -> None:
        if value is not None:
            self._direction = value

    @property
    def offset(self) -> int:
        return self._page_number * self._page_size

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__}(page_number={self._page_number}, "
            f"page_size={self._page_size}, sort_by='{self._sort_by}', "
            f"direction='{self._direction}')>"
        )


class ExampleSearchRequest(PaginationOrderRequest):
    """Listing request for examples with case-insensitive "contains" filters."""

    def __init__(
        self,
        page_number: int = MIN_PAGE_NUMBER,
        page_size: int = DEFAULT_PAGE_SIZE,
        sort_by: str | None = None,
        direction: str | None = None,
        *,
        name: str = "",
        description: str = "",
    ):
        super().__init__(page_number, page_size, sort_by, direction)
        self.name = name or ""
        self.description = description or ""
