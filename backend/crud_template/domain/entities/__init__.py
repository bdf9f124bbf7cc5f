from .base import BaseEntity
from .example import Example

__all__ = [
    "BaseEntity",
    "Example",
]
