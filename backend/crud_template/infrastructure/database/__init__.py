from .base import AuditMixin, Base
from .session import engine, async_session_factory, get_db_session
from .models import ExampleModel

__all__ = [
    "AuditMixin",
    "Base",
    "engine",
    "async_session_factory",
    "get_db_session",
    "ExampleModel",
]
