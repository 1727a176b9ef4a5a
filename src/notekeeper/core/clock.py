"""Injectable time sources."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from notekeeper.db.time import utcnow


class Clock(Protocol):
    """Anything that can tell the current UTC time."""

    def now(self) -> datetime: ...


class UtcClock:
    """Production clock backed by the system time."""

    def now(self) -> datetime:
        return utcnow()


class FrozenClock:
    """Manually driven clock for deterministic tests and scripts."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or utcnow()

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward and return the new time."""
        self._now += delta
        return self._now

    def set(self, moment: datetime) -> None:
        self._now = moment


def get_clock() -> Clock:
    """Return the clock used by request handlers."""
    return _DEFAULT_CLOCK


_DEFAULT_CLOCK = UtcClock()
