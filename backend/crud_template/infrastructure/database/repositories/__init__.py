from .base_repository import SQLAlchemyBaseRepository
from .example_repository import SQLAlchemyExampleRepository

__all__ = [
    "SQLAlchemyBaseRepository",
    "SQLAlchemyExampleRepository",
]
