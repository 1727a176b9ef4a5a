"""Per-owner serialisation of read-modify-write sequences."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

__all__ = ["OwnerLocks", "owner_locks"]


class OwnerLocks:
    """Registry of ``asyncio.Lock`` objects keyed by (kind, owner).

    Locks only exist while someone holds or waits for them. They serialise
    work inside one process; separate worker processes are not coordinated.
    """

    def __init__(self) -> None:
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._users: dict[tuple[str, str], int] = {}

    @asynccontextmanager
    async def hold(self, kind: str, owner_id: str) -> AsyncIterator[None]:
        key = (kind, owner_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


owner_locks = OwnerLocks()
