"""In-memory entity store, made durable by composing a persistence strategy."""

import locale
import logging
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Any

from resource_api.application.interfaces import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    EntityStore,
    NullPersistence,
    Page,
    Persistence,
    SortOption,
    normalize_page,
)
from resource_api.application.interfaces.entity_store import T
from resource_api.domain.exceptions import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _name_key(name: str) -> str:
    # strxfrm rejects embedded NUL characters
    return locale.strxfrm(name.replace("\x00", ""))


class InMemoryEntityStore(EntityStore[T]):
    """Implements the EntityStore port over a dict keyed by natural key.

    Every backend kind keeps this full in-memory mirror for reads. Durability
    comes from the ``persistence`` strategy, which is told about each change
    after the map has been updated. Map updates never suspend, so the
    in-memory state is consistent per operation even when writes interleave.
    """

    def __init__(
        self,
        entity_cls: type[T],
        entities: Iterable[T] = (),
        *,
        persistence: Persistence[T] | None = None,
        default_sort: SortOption = SortOption.REVERSE_CHRONO,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        id_factory: Callable[[], str] = _new_id,
    ):
        self._entity_cls = entity_cls
        self._items: dict[str, T] = {entity.key: entity for entity in entities}
        self._persistence: Persistence[T] = persistence or NullPersistence()
        self._default_sort = default_sort
        self._default_page_size = default_page_size
        self._id_factory = id_factory

    @classmethod
    async def open(
        cls,
        entity_cls: type[T],
        persistence: Persistence[T],
        **kwargs: Any,
    ) -> "InMemoryEntityStore[T]":
        """Build a store pre-populated from whatever ``persistence`` holds."""
        entities = await persistence.load()
        store = cls(entity_cls, entities, persistence=persistence, **kwargs)
        logger.info(
            "Loaded %d %s record(s) via %s",
            len(store._items),
            entity_cls.entity_type,
            type(persistence).__name__,
        )
        return store

    @property
    def entity_cls(self) -> type[T]:
        return self._entity_cls

    @property
    def persistence(self) -> Persistence[T]:
        return self._persistence

    def snapshot(self) -> list[T]:
        """Current collection in key order."""
        return [self._items[key] for key in sorted(self._items)]

    def _sorted(self, sort: SortOption) -> list[T]:
        items = list(self._items.values())
        if sort in (SortOption.NAME, SortOption.REVERSE_NAME):
            return sorted(
                items,
                key=lambda e: (_name_key(e.sort_name), e.id),
                reverse=sort is SortOption.REVERSE_NAME,
            )
        return sorted(
            items,
            key=lambda e: (e.sort_date or _EPOCH, e.id),
            reverse=sort is SortOption.REVERSE_CHRONO,
        )

    async def get_list(
        self,
        page: int = DEFAULT_PAGE,
        page_size: int | None = None,
        sort: SortOption | None = None,
        where: Callable[[T], bool] | None = None,
    ) -> Page[T]:
        page = normalize_page(page, DEFAULT_PAGE)
        page_size = normalize_page(page_size, self._default_page_size)

        items = self._sorted(sort or self._default_sort)
        if where is not None:
            items = [item for item in items if where(item)]

        skip = page_size * (page - 1)
        return Page(
            items=items[skip : skip + page_size],
            more_pages=skip + page_size < len(items),
        )

    async def count(self, where: Callable[[T], bool] | None = None) -> int:
        if where is None:
            return len(self._items)
        return sum(1 for item in self._items.values() if where(item))

    async def get_by_key(self, key: str) -> T:
        entity = self._items.get(key)
        if entity is None:
            raise NotFoundError(self._entity_cls.entity_type, key)
        return entity

    async def add(self, raw: Any) -> T:
        entity = self._entity_cls.from_new_json(raw, self._id_factory())
        self._ensure_key_free(entity.key)

        self._items[entity.key] = entity
        await self._persistence.saved(entity, self.snapshot())

        logger.debug("Added %s '%s'", self._entity_cls.entity_type, entity.key)
        return entity

    async def update(self, entity: T, previous_key: str | None = None) -> T:
        if not isinstance(entity, self._entity_cls):
            raise TypeError(
                f"Expected {self._entity_cls.__name__}, got {type(entity).__name__}"
            )

        old_key = previous_key or entity.key
        if old_key not in self._items:
            raise NotFoundError(self._entity_cls.entity_type, old_key)
        renamed = entity.key != old_key
        if renamed:
            self._ensure_key_free(entity.key)

        del self._items[old_key]
        self._items[entity.key] = entity
        await self._persistence.saved(
            entity, self.snapshot(), previous_key=old_key if renamed else None
        )

        logger.debug("Updated %s '%s'", self._entity_cls.entity_type, entity.key)
        return entity

    async def delete(self, key: str) -> T:
        entity = self._items.pop(key, None)
        if entity is None:
            raise NotFoundError(self._entity_cls.entity_type, key)

        await self._persistence.deleted(entity, self.snapshot())

        logger.debug("Deleted %s '%s'", self._entity_cls.entity_type, key)
        return entity

    async def backup(self) -> None:
        await self._persistence.backup(self.snapshot())

    async def close(self) -> None:
        await self._persistence.close()

    def _ensure_key_free(self, key: str) -> None:
        if key in self._items:
            field = self._entity_cls.key_field
            raise InvalidInputError(
                f"{self._entity_cls.entity_type} with {field} '{key}' already exists",
                [field],
            )
