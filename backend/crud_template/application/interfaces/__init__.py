from .base_repository import BaseRepository, ExecutionStrategy
from .entity_mapper import EntityMapper
from .example_repository import ExampleRepository

__all__ = [
    "BaseRepository",
    "ExecutionStrategy",
    "EntityMapper",
    "ExampleRepository",
]
