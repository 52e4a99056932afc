"""Document-database persistence backed by SQLAlchemy async sessions.

Each entity kind is a collection of JSON documents in the ``documents`` table,
unique on ``(collection, key)``. Unlike the file strategy, only the changed
document is written on each mutation.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resource_api.application.interfaces import Persistence
from resource_api.application.interfaces.entity_store import T
from resource_api.domain.exceptions import InvalidInputError
from resource_api.infrastructure.database.models import DocumentModel

logger = logging.getLogger(__name__)


class DatabasePersistence(Persistence[T]):
    """Implements the Persistence port over one document collection."""

    def __init__(
        self,
        entity_cls: type[T],
        session_factory: async_sessionmaker[AsyncSession],
        collection: str,
    ):
        self._entity_cls = entity_cls
        self._session_factory = session_factory
        self._collection = collection

    @property
    def collection(self) -> str:
        return self._collection

    async def load(self) -> list[T]:
        async with self._session_factory() as session:
            stmt = select(DocumentModel).where(DocumentModel.collection == self._collection)
            result = await session.execute(stmt)
            models = result.scalars().all()

        entities: list[T] = []
        for model in models:
            try:
                entities.append(self._entity_cls.from_json(model.data))
            except InvalidInputError as exc:
                logger.error(
                    "Skipping invalid %s document '%s': %s",
                    self._entity_cls.entity_type,
                    model.key,
                    exc,
                )
        return entities

    async def saved(self, entity: T, snapshot: list[T], previous_key: str | None = None) -> None:
        async with self._session_factory() as session:
            if previous_key is not None:
                await session.execute(self._delete_stmt(previous_key))

            stmt = select(DocumentModel).where(
                DocumentModel.collection == self._collection,
                DocumentModel.key == entity.key,
            )
            model = (await session.execute(stmt)).scalar_one_or_none()
            if model is None:
                session.add(
                    DocumentModel(
                        collection=self._collection,
                        key=entity.key,
                        data=entity.to_json(),
                    )
                )
            else:
                model.data = entity.to_json()
            await session.commit()

    async def deleted(self, entity: T, snapshot: list[T]) -> None:
        async with self._session_factory() as session:
            await session.execute(self._delete_stmt(entity.key))
            await session.commit()

    async def backup(self, snapshot: list[T]) -> None:
        # The database keeps its own durable copy
        logger.debug("Skipping backup of %s collection", self._collection)

    def _delete_stmt(self, key: str):
        return delete(DocumentModel).where(
            DocumentModel.collection == self._collection,
            DocumentModel.key == key,
        )
