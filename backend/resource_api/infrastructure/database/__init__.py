from .base import Base
from .session import create_engine, create_session_factory, create_tables
from .models import DocumentModel

__all__ = [
    "Base",
    "create_engine",
    "create_session_factory",
    "create_tables",
    "DocumentModel",
]
