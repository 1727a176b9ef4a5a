"""Owner-scoped note management."""

from __future__ import annotations

import logging

from notekeeper.core.errors import ForbiddenError, NotFoundError
from notekeeper.models.note import Note
from notekeeper.repositories.note_repo import NoteRepository

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class NoteService:
    """CRUD over notes, restricted to the notes a user owns."""

    def __init__(self, repository: NoteRepository, log: logging.Logger | None = None) -> None:
        self.repository = repository
        self.logger = log or logger

    async def create(self, owner_id: str, label: str, content: str | None) -> Note:
        note = await self.repository.create(owner_id=owner_id, label=label.strip(), content=content)
        self.logger.info("Note %s created by user %s", note.id, owner_id)
        return note

    async def list_notes(
        self,
        owner_id: str,
        *,
        page: int = 1,
        limit: int = 10,
        query: str | None = None,
    ) -> tuple[list[Note], int]:
        """Return one page of the owner's notes and the total match count.

        ``page`` starts at 1; ``limit`` is clamped to ``MAX_PAGE_SIZE``.
        """
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)
        term = query.strip() if query else None
        return await self.repository.list_for_owner(
            owner_id,
            offset=(page - 1) * limit,
            limit=limit,
            query=term or None,
        )

    async def get(self, owner_id: str, note_id: str) -> Note:
        """Return a note the caller owns.

        Raises:
            NotFoundError: The note does not exist or was deleted.
            ForbiddenError: The note belongs to someone else.
        """
        note = await self.repository.get_by_id(note_id)
        if note is None:
            self.logger.warning("Note %s not found", note_id)
            raise NotFoundError("Note not found")
        if note.owner_id != owner_id:
            self.logger.warning("User %s denied access to note %s", owner_id, note_id)
            raise ForbiddenError("You are not allowed to access this note")
        return note

    async def update(
        self,
        owner_id: str,
        note_id: str,
        label: str | None,
        content: str | None,
    ) -> Note:
        note = await self.get(owner_id, note_id)
        return await self.repository.update(
            note,
            label=label.strip() if label else None,
            content=content,
        )

    async def delete(self, owner_id: str, note_id: str) -> None:
        note = await self.get(owner_id, note_id)
        await self.repository.soft_delete(note)
        self.logger.info("Note %s deleted by user %s", note_id, owner_id)
