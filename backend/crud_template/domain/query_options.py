"""Declarative filter/sort descriptor consumed by the repositories."""

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass
class QueryOptions:
    """Per-call options for ``BaseRepository.all``.

    ``where`` holds backend boolean clauses (SQLAlchemy column expressions for
    the SQLAlchemy repositories); they are AND-ed together.
    """

    read_only: bool = True
    only_actives: bool = False
    where: list[Any] = field(default_factory=list)
    include_deleted: bool = False
    sort_by: str = "Id"
    direction: str = "desc"

    def filter(self, *clauses: Any) -> "QueryOptions":
        """Return a copy with the given clauses appended to ``where``."""
        return replace(self, where=[*self.where, *clauses])
