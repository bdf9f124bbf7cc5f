"""Base domain entity with identity, audit timestamps and soft-delete marker."""

from dataclasses import dataclass, field
from datetime import datetime

from crud_template.domain.clock import civil_now


@dataclass(kw_only=True)
class BaseEntity:
    """Common shape of every persisted entity.

    ``deleted_at`` is the only soft-delete marker: ``None`` means active.
    ``updated_at`` starts equal to ``created_at``.
    """

    id: int | None = None
    created_at: datetime = field(default_factory=civil_now)
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def mark_deleted(self, at: datetime) -> None:
        self.deleted_at = at

    def restore(self) -> None:
        self.deleted_at = None

    def touch(self, at: datetime) -> None:
        """Refresh ``updated_at`` after a successful change."""
        self.updated_at = at
