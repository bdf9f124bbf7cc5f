from .base import ApiSchema
from .errors import ErrorResponse
from .example import ExampleCreate, ExampleUpdate, ExampleResponse
from .pagination import PaginationResponse

__all__ = [
    "ApiSchema",
    "ErrorResponse",
    "ExampleCreate",
    "ExampleUpdate",
    "ExampleResponse",
    "PaginationResponse",
]
