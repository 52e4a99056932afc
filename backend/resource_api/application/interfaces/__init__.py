from .entity_store import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    EntityStore,
    Page,
    SortOption,
    normalize_page,
)
from .persistence import NullPersistence, Persistence

__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "EntityStore",
    "Page",
    "SortOption",
    "normalize_page",
    "NullPersistence",
    "Persistence",
]
