"""Note endpoints; every operation is limited to the caller's own notes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from notekeeper.api.v1.dependencies import CurrentUserDep, NoteServiceDep
from notekeeper.schemas.common import MessageResponse
from notekeeper.schemas.note import NoteCreate, NotePage, NoteResponse, NoteUpdate
from notekeeper.services.note_service import MAX_PAGE_SIZE

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteCreate,
    current_user: CurrentUserDep,
    notes: NoteServiceDep,
) -> NoteResponse:
    note = await notes.create(current_user.id, payload.label, payload.content)
    return NoteResponse.model_validate(note)


@router.get("", response_model=NotePage)
async def list_notes(
    current_user: CurrentUserDep,
    notes: NoteServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = 10,
    query: Annotated[str | None, Query(max_length=255)] = None,
) -> NotePage:
    """List the caller's notes, newest first, optionally filtered by ``query``."""
    items, total = await notes.list_notes(current_user.id, page=page, limit=limit, query=query)
    return NotePage(
        data=[NoteResponse.model_validate(note) for note in items],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: str,
    current_user: CurrentUserDep,
    notes: NoteServiceDep,
) -> NoteResponse:
    note = await notes.get(current_user.id, note_id)
    return NoteResponse.model_validate(note)


@router.patch("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    current_user: CurrentUserDep,
    notes: NoteServiceDep,
) -> NoteResponse:
    """Update label and/or content; omitted fields are left unchanged."""
    note = await notes.update(current_user.id, note_id, payload.label, payload.content)
    return NoteResponse.model_validate(note)


@router.delete("/{note_id}", response_model=MessageResponse)
async def delete_note(
    note_id: str,
    current_user: CurrentUserDep,
    notes: NoteServiceDep,
) -> MessageResponse:
    await notes.delete(current_user.id, note_id)
    return MessageResponse(message="Note deleted successfully")
