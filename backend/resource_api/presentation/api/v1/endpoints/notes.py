"""Note CRUD endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from resource_api.application.services import NoteService
from resource_api.infrastructure.dependencies import get_note_service
from resource_api.presentation.api.params import PageParams, page_params

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get("")
async def list_notes(
    params: PageParams = Depends(page_params),
    service: NoteService = Depends(get_note_service),
) -> dict:
    """Retrieve one page of notes, newest first."""
    result = await service.get_notes(page=params.page, pagination=params.pagination)
    return {
        "notes": [note.to_json() for note in result.items],
        "morePages": result.more_pages,
    }


@router.get("/{note_id}")
async def get_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> dict:
    note = await service.get_note(note_id)
    return note.to_json()


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_note(
    raw: Any = Body(None),
    service: NoteService = Depends(get_note_service),
) -> dict:
    """Create a note. The server assigns the id and, when omitted, ``dateAdded``."""
    note = await service.add_note(raw)
    return note.to_json()


@router.put("/{note_id}")
async def update_note(
    note_id: str,
    raw: Any = Body(None),
    service: NoteService = Depends(get_note_service),
) -> dict:
    note = await service.update_note(note_id, raw)
    return note.to_json()


@router.delete("/{note_id}")
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> dict:
    """Delete a note and return its last value."""
    note = await service.delete_note(note_id)
    return note.to_json()
