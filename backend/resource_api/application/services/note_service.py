"""Application service (use case) for Note operations."""

from typing import Any

from resource_api.application.interfaces import DEFAULT_PAGE, EntityStore, Page
from resource_api.domain.entities import Note


class NoteService:
    """Orchestrates note operations. Depends on the entity store port (DI)."""

    def __init__(self, store: EntityStore[Note]):
        self._store = store

    async def get_notes(
        self, page: int = DEFAULT_PAGE, pagination: int | None = None
    ) -> Page[Note]:
        return await self._store.get_list(page=page, page_size=pagination)

    async def get_note(self, note_id: str) -> Note:
        return await self._store.get_by_key(note_id)

    async def add_note(self, raw: Any) -> Note:
        return await self._store.add(raw)

    async def update_note(self, note_id: str, raw: Any) -> Note:
        note = await self._store.get_by_key(note_id)
        return await self._store.update(note.with_json(raw))

    async def delete_note(self, note_id: str) -> Note:
        return await self._store.delete(note_id)
