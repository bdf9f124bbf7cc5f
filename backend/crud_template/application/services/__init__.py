from .base_service import CrudHooks, CrudService
from .example_service import ExampleHooks, ExampleMapper, ExampleService

__all__ = [
    "CrudHooks",
    "CrudService",
    "ExampleHooks",
    "ExampleMapper",
    "ExampleService",
]
