"""Data access helpers for login codes and reset requests."""
from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.models.throttled_record import RecordKind, ThrottledRecord

__all__ = ["ThrottledRecordRepository"]


class ThrottledRecordRepository:
    """Thin wrapper around database access for throttled records.

    Every write commits so a following read sees it.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with an async SQLAlchemy session."""
        self.session = session

    async def find_active_by_owner(
        self, owner_id: str, kind: RecordKind
    ) -> ThrottledRecord | None:
        """Return the owner's record of the given kind, if any."""
        result = await self.session.execute(
            select(ThrottledRecord).where(
                ThrottledRecord.owner_id == owner_id,
                ThrottledRecord.kind == kind.value,
            )
        )
        return result.scalars().first()

    async def find_by_secret(self, kind: RecordKind, secret_hash: str) -> ThrottledRecord | None:
        """Return the record whose stored digest equals ``secret_hash``."""
        result = await self.session.execute(
            select(ThrottledRecord).where(
                ThrottledRecord.kind == kind.value,
                ThrottledRecord.secret_hash == secret_hash,
            )
        )
        return result.scalars().first()

    async def create(self, record: ThrottledRecord) -> ThrottledRecord:
        """Insert a new record and return the persisted ORM instance."""
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        return record

    async def update(self, record_id: str, **fields: Any) -> ThrottledRecord | None:
        """Apply ``fields`` to the record and return its refreshed state."""
        await self.session.execute(
            update(ThrottledRecord)
            .where(ThrottledRecord.id == record_id)
            .values(**fields)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.commit()
        result = await self.session.execute(
            select(ThrottledRecord)
            .where(ThrottledRecord.id == record_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def delete(self, owner_id: str, kind: RecordKind) -> int:
        """Remove the owner's record of ``kind``; return the number of rows deleted."""
        result = await self.session.execute(
            delete(ThrottledRecord).where(
                ThrottledRecord.owner_id == owner_id,
                ThrottledRecord.kind == kind.value,
            )
        )
        await self.session.commit()
        return result.rowcount or 0
