"""Data access helpers for working with notes."""
from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.db.time import utcnow
from notekeeper.models.note import Note

__all__ = ["NoteRepository"]


def _escape_like(term: str) -> str:
    """Make LIKE wildcards in ``term`` match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class NoteRepository:
    """Thin wrapper around database access for note entities."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with an async SQLAlchemy session."""
        self.session = session

    async def get_by_id(self, note_id: str) -> Note | None:
        """Return a note that has not been soft-deleted."""
        result = await self.session.execute(
            select(Note).where(Note.id == note_id, Note.deleted.is_(False))
        )
        return result.scalars().first()

    async def list_for_owner(
        self,
        owner_id: str,
        *,
        offset: int,
        limit: int,
        query: str | None = None,
    ) -> tuple[list[Note], int]:
        """Return one page of the owner's notes and the total number of matches.

        Args:
            owner_id: Identifier of the owning user.
            offset: Number of matching notes to skip.
            limit: Maximum number of notes to return.
            query: Optional case-insensitive search term over label and content.
        """
        filters = [Note.owner_id == owner_id, Note.deleted.is_(False)]
        if query:
            pattern = f"%{_escape_like(query.lower())}%"
            filters.append(
                or_(
                    func.lower(Note.label).like(pattern, escape="\\"),
                    func.lower(Note.content).like(pattern, escape="\\"),
                )
            )

        total = await self.session.scalar(select(func.count()).select_from(Note).where(*filters))
        result = await self.session.execute(
            select(Note)
            .where(*filters)
            .order_by(Note.created_at.desc(), Note.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().unique()), int(total or 0)

    async def create(self, *, owner_id: str, label: str, content: str | None) -> Note:
        """Insert a new note and return the persisted ORM instance."""
        note = Note(owner_id=owner_id, label=label, content=content)
        self.session.add(note)
        await self.session.commit()
        return await self._reload(note.id)

    async def update(self, note: Note, *, label: str | None, content: str | None) -> Note:
        """Overwrite the provided fields, keeping the others."""
        if label:
            note.label = label
        if content:
            note.content = content
        await self.session.commit()
        return await self._reload(note.id)

    async def _reload(self, note_id: str) -> Note:
        result = await self.session.execute(
            select(Note).where(Note.id == note_id).execution_options(populate_existing=True)
        )
        return result.scalars().one()

    async def soft_delete(self, note: Note) -> None:
        note.deleted = True
        note.deleted_at = utcnow()
        await self.session.commit()
