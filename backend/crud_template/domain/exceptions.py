"""Domain-specific exceptions — framework-independent.

Every class carries an ``error_type`` label; the HTTP boundary uses it (and
the class hierarchy) to pick a status code and build the error payload.
"""


class DomainError(Exception):
    """Base class for all recognised application errors."""

    error_type = "Unclassified"


class EntityNotFoundError(DomainError):
    """Raised when a requested entity does not exist (or is soft-deleted)."""

    error_type = "NotFound"

    def __init__(self, entity_type: str, entity_id: int | str | None = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        if entity_id is None:
            super().__init__(f"{entity_type} not found")
        else:
            super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ValidationFailureError(DomainError):
    """Raised when a business rule rejects the requested change."""

    error_type = "ValidationFailure"


class DuplicateEntityError(ValidationFailureError):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class RecordStateError(EntityNotFoundError, ValidationFailureError):
    """Raised when a record is already in the lifecycle state being requested.

    It is both a validation failure and a not-found condition: callers may
    catch either, and the HTTP boundary answers 404.
    """

    error_type = "ValidationFailure"

    def __init__(self, entity_type: str, entity_id: int | str | None, message: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        Exception.__init__(self, message)


class InvalidOperationError(DomainError):
    """Raised on structural misuse (e.g. an update payload without an id)."""

    error_type = "InvalidOperation"


class SchemaMismatchError(InvalidOperationError):
    """Raised when a query needs a field the entity type does not have."""

    error_type = "SchemaMismatch"

    def __init__(self, entity_type: str, field: str):
        self.entity_type = entity_type
        self.field = field
        super().__init__(f"Column '{field}' does not exist on entity '{entity_type}'")


class MissingFieldError(SchemaMismatchError):
    """Raised when a lookup relies on a field (e.g. branch_id) the entity lacks."""


class UnauthorizedError(DomainError):
    """Raised when the caller is not allowed to perform the operation."""

    error_type = "Unauthorized"


class MalformedArgumentError(DomainError, ValueError):
    """Raised when an argument is structurally invalid (e.g. an empty batch)."""

    error_type = "MalformedArgument"
