"""Abstract repository interface (port) for Example persistence."""

from abc import abstractmethod
from typing import Any

from crud_template.application.interfaces.base_repository import BaseRepository
from crud_template.domain.entities import Example
from crud_template.domain.requests import ExampleSearchRequest


class ExampleRepository(BaseRepository[Example]):
    """Port for example persistence — implemented in the infrastructure layer."""

    @abstractmethod
    def search(self, request: ExampleSearchRequest) -> Any:
        """Active examples whose name/description contain the request filters."""
        ...

    @abstractmethod
    async def name_exists(self, name: str, exclude_id: int | None = None) -> bool:
        """Case-insensitive name check over active examples."""
        ...
