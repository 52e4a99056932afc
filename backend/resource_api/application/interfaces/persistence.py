"""Persistence strategy interface: how a store makes its collection durable."""

from abc import ABC, abstractmethod
from typing import Generic

from resource_api.application.interfaces.entity_store import T


class Persistence(ABC, Generic[T]):
    """Durability hook composed into an in-memory store.

    The store mutates its map first, then calls one of these with the changed
    entity and a snapshot of the whole collection. Implementations choose
    which of the two they need.
    """

    @abstractmethod
    async def load(self) -> list[T]:
        """Read back every entity persisted so far."""
        ...

    @abstractmethod
    async def saved(self, entity: T, snapshot: list[T], previous_key: str | None = None) -> None:
        """An entity was added or replaced (``previous_key`` set on a key change)."""
        ...

    @abstractmethod
    async def deleted(self, entity: T, snapshot: list[T]) -> None:
        """An entity was removed."""
        ...

    @abstractmethod
    async def backup(self, snapshot: list[T]) -> None:
        """Write a point-in-time copy without disturbing the live data."""
        ...

    async def close(self) -> None:
        """Release any held resources."""
        return None


class NullPersistence(Persistence[T]):
    """Keeps nothing: the collection lives only in process memory."""

    async def load(self) -> list[T]:
        return []

    async def saved(self, entity: T, snapshot: list[T], previous_key: str | None = None) -> None:
        return None

    async def deleted(self, entity: T, snapshot: list[T]) -> None:
        return None

    async def backup(self, snapshot: list[T]) -> None:
        return None
