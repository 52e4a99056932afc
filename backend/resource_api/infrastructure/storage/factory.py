"""Backend selection: builds one entity store per kind from the storage settings."""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from resource_api.application.interfaces import DEFAULT_PAGE_SIZE, SortOption
from resource_api.config import ModuleStorage, StorageKind, StorageSettings
from resource_api.domain.entities import (
    BlogPost,
    Deposit,
    Entity,
    FileDetails,
    Note,
    Purchase,
    PurchasePrice,
    Task,
    TaskDeposit,
    ViceBankUser,
)
from resource_api.infrastructure.database import (
    create_engine,
    create_session_factory,
    create_tables,
)
from resource_api.infrastructure.storage.database_persistence import DatabasePersistence
from resource_api.infrastructure.storage.json_file_persistence import open_json_file_store
from resource_api.infrastructure.storage.memory_store import InMemoryEntityStore

logger = logging.getLogger(__name__)

FILE_LIST_PAGE_SIZE = 20


@dataclass(frozen=True)
class StoreSpec:
    """Static description of one entity kind's store."""

    entity_cls: type[Entity]
    module: str
    base_name: str
    default_sort: SortOption = SortOption.REVERSE_CHRONO
    default_page_size: int = DEFAULT_PAGE_SIZE


STORE_SPECS: dict[str, StoreSpec] = {
    "notes": StoreSpec(Note, "notes", "notes_data"),
    "blog_posts": StoreSpec(BlogPost, "blog", "blog_data"),
    "files": StoreSpec(FileDetails, "files", "file_data", default_page_size=FILE_LIST_PAGE_SIZE),
    "vice_bank_users": StoreSpec(
        ViceBankUser, "vice_bank", "vice_bank_user_data", default_sort=SortOption.NAME
    ),
    "deposits": StoreSpec(Deposit, "vice_bank", "deposit_data"),
    "purchases": StoreSpec(Purchase, "vice_bank", "purchase_data"),
    "purchase_prices": StoreSpec(
        PurchasePrice, "vice_bank", "purchase_price_data", default_sort=SortOption.NAME
    ),
    "tasks": StoreSpec(Task, "vice_bank", "task_data", default_sort=SortOption.NAME),
    "task_deposits": StoreSpec(TaskDeposit, "vice_bank", "task_deposit_data"),
}


class StoreRegistry:
    """Holds the active store for every entity kind plus any shared database engine."""

    def __init__(
        self,
        stores: dict[str, InMemoryEntityStore[Any]],
        engine: AsyncEngine | None = None,
    ):
        self._stores = stores
        self._engine = engine

    def __getitem__(self, name: str) -> InMemoryEntityStore[Any]:
        return self._stores[name]

    def items(self):
        return self._stores.items()

    async def close(self) -> None:
        for store in self._stores.values():
            await store.close()
        if self._engine is not None:
            await self._engine.dispose()


async def build_store(
    spec: StoreSpec,
    storage: ModuleStorage,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> InMemoryEntityStore[Any]:
    """Instantiate the store for ``spec`` on the configured backend.

    Never raises for configuration or storage problems: it falls back to an
    in-memory store and logs why.
    """
    options = {
        "default_sort": spec.default_sort,
        "default_page_size": spec.default_page_size,
    }

    if storage.kind is StorageKind.FILE and storage.file_path:
        try:
            return await open_json_file_store(
                spec.entity_cls, storage.file_path, spec.base_name, **options
            )
        except OSError:
            logger.exception(
                "Could not open %s data under %s; using memory",
                spec.entity_cls.entity_type,
                storage.file_path,
            )
    elif storage.kind is StorageKind.DATABASE and session_factory is not None:
        persistence = DatabasePersistence(spec.entity_cls, session_factory, spec.base_name)
        try:
            return await InMemoryEntityStore.open(spec.entity_cls, persistence, **options)
        except SQLAlchemyError:
            logger.exception(
                "Could not load %s documents; using memory", spec.entity_cls.entity_type
            )
    elif storage.kind is StorageKind.DATABASE:
        logger.warning(
            "Database unavailable for %s; using memory", spec.entity_cls.entity_type
        )

    return InMemoryEntityStore(spec.entity_cls, **options)


async def build_stores(settings: StorageSettings) -> StoreRegistry:
    """Build every store named in ``STORE_SPECS`` from the resolved settings."""
    engine: AsyncEngine | None = None
    session_factory: async_sessionmaker[AsyncSession] | None = None

    wants_database = any(
        settings.for_module(spec.module).kind is StorageKind.DATABASE
        for spec in STORE_SPECS.values()
    )
    if wants_database and settings.database_url:
        try:
            engine = create_engine(settings.database_url)
            await create_tables(engine)
            session_factory = create_session_factory(engine)
        except (SQLAlchemyError, OSError, ImportError):
            logger.exception("Could not connect to the document database")
            if engine is not None:
                await engine.dispose()
            engine = None

    stores = {}
    for name, spec in STORE_SPECS.items():
        stores[name] = await build_store(spec, settings.for_module(spec.module), session_factory)
        logger.info(
            "Store '%s' ready (%s)", name, type(stores[name].persistence).__name__
        )

    return StoreRegistry(stores, engine)
