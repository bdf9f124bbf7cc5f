"""Explicit entity ↔ DTO conversion port."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

EntityT = TypeVar("EntityT")
DtoT = TypeVar("DtoT")
CreateT = TypeVar("CreateT")
UpdateT = TypeVar("UpdateT")


class EntityMapper(ABC, Generic[EntityT, DtoT, CreateT, UpdateT]):
    """Hand-written conversions between one entity and its DTO shapes."""

    @abstractmethod
    def to_dto(self, entity: EntityT) -> DtoT:
        ...

    @abstractmethod
    def to_entity(self, data: CreateT) -> EntityT:
        ...

    @abstractmethod
    def merge(self, data: UpdateT, entity: EntityT) -> None:
        """Copy every updatable field of ``data`` onto ``entity``."""
        ...
