"""Attempt throttling shared by login codes and password reset requests.

The policy is a pure function of a record's counters and the current time; the
stores decide what to persist based on its answer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_LOCKOUT = timedelta(hours=24)


class Throttled(Protocol):
    """Fields the policy reads and the reissue rule writes."""

    attempt_count: int
    expires_at: datetime
    lockout_until: datetime | None


@dataclass(frozen=True)
class Allow:
    """No lockout recorded; a new secret may be issued."""


@dataclass(frozen=True)
class AllowAndResetCount:
    """The lockout window has elapsed; counting starts over."""


@dataclass(frozen=True)
class Reject:
    """A lockout is active for another ``wait_hours`` h ``wait_minutes`` min."""

    wait_hours: int
    wait_minutes: int


Decision = Allow | AllowAndResetCount | Reject


@dataclass(frozen=True)
class ReissueUpdate:
    """Counter values to persist after an allowed reissue."""

    attempt_count: int
    expires_at: datetime
    lockout_until: datetime | None

    def as_fields(self) -> dict[str, object]:
        return {
            "attempt_count": self.attempt_count,
            "expires_at": self.expires_at,
            "lockout_until": self.lockout_until,
        }


class ThrottlePolicy:
    """Lockout rules: ``max_attempts`` reissues, then wait ``lockout``."""

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        lockout: timedelta = DEFAULT_LOCKOUT,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.lockout = lockout

    def evaluate(self, record: Throttled, now: datetime) -> Decision:
        """Decide whether ``record`` may be reissued at ``now``."""
        lockout_until = record.lockout_until
        if lockout_until is None:
            return Allow()
        if lockout_until > now:
            hours, minutes = split_wait(lockout_until - now)
            return Reject(wait_hours=hours, wait_minutes=minutes)
        return AllowAndResetCount()

    def apply_reissue(
        self,
        record: Throttled,
        decision: Decision,
        now: datetime,
        expires_at: datetime,
    ) -> ReissueUpdate:
        """Compute the counters to store after an allowed reissue.

        An elapsed lockout restarts the count at zero and is dropped; reaching
        ``max_attempts`` opens a new lockout window starting at ``now``.
        """
        if isinstance(decision, Reject):
            raise ValueError("cannot reissue a rejected record")

        count = record.attempt_count
        lockout_until = record.lockout_until
        if isinstance(decision, AllowAndResetCount):
            count = 0
            lockout_until = None

        count += 1
        if count >= self.max_attempts:
            lockout_until = now + self.lockout

        return ReissueUpdate(
            attempt_count=count,
            expires_at=expires_at,
            lockout_until=lockout_until,
        )


def split_wait(remaining: timedelta) -> tuple[int, int]:
    """Round ``remaining`` up to whole minutes and split it into (hours, minutes)."""
    total_minutes = max(0, math.ceil(remaining.total_seconds() / 60))
    hours, minutes = divmod(total_minutes, 60)
    return hours, minutes
