"""Abstract entity store interface (port): the contract every storage backend fulfils."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from resource_api.domain.entities import Entity

T = TypeVar("T", bound=Entity)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


class SortOption(str, Enum):
    """Orderings a listing can be returned in."""

    REVERSE_CHRONO = "reverseChrono"
    CHRONO = "chrono"
    NAME = "filename"
    REVERSE_NAME = "reverseFilename"


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a sorted listing."""

    items: list[T]
    more_pages: bool


def normalize_page(value: Any, default: int) -> int:
    """Clamp a page number or page size to ``default`` when it is not a positive int."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return default
    return value


class EntityStore(ABC, Generic[T]):
    """Port for entity persistence, generic over the entity kind.

    Stores are keyed by the entity's natural key (``Entity.key``).
    """

    @abstractmethod
    async def get_list(
        self,
        page: int = DEFAULT_PAGE,
        page_size: int | None = None,
        sort: SortOption | None = None,
        where: Callable[[T], bool] | None = None,
    ) -> Page[T]:
        """Return one page of the sorted (and optionally filtered) collection."""
        ...

    @abstractmethod
    async def count(self, where: Callable[[T], bool] | None = None) -> int:
        """Number of entities, optionally only those matching ``where``."""
        ...

    @abstractmethod
    async def get_by_key(self, key: str) -> T:
        """Return the entity stored under ``key``. Raises ``NotFoundError``."""
        ...

    @abstractmethod
    async def add(self, raw: Any) -> T:
        """Validate a creation payload, assign a fresh id, store and return it."""
        ...

    @abstractmethod
    async def update(self, entity: T, previous_key: str | None = None) -> T:
        """Replace an existing entity. Raises ``NotFoundError`` when absent.

        ``previous_key`` allows the natural key itself to change.
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> T:
        """Remove the entity and return its last value. Raises ``NotFoundError``."""
        ...

    @abstractmethod
    async def backup(self) -> None:
        """Persist a point-in-time copy of the collection (may be a no-op)."""
        ...
