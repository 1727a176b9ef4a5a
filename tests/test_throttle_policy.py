"""Unit tests for the attempt throttling rules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pytest

from notekeeper.services.throttle import (
    Allow,
    AllowAndResetCount,
    Reject,
    ThrottlePolicy,
    split_wait,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@dataclass
class Record:
    attempt_count: int = 0
    expires_at: datetime = NOW
    lockout_until: datetime | None = None


@pytest.fixture()
def policy() -> ThrottlePolicy:
    return ThrottlePolicy()


def test_no_lockout_allows(policy: ThrottlePolicy) -> None:
    assert policy.evaluate(Record(attempt_count=3), NOW) == Allow()


@pytest.mark.parametrize(
    "lockout_until",
    [NOW, NOW - timedelta(seconds=1), NOW - timedelta(days=3)],
)
def test_elapsed_lockout_never_rejects(policy: ThrottlePolicy, lockout_until: datetime) -> None:
    decision = policy.evaluate(Record(attempt_count=5, lockout_until=lockout_until), NOW)
    assert decision == AllowAndResetCount()


@pytest.mark.parametrize(
    ("remaining", "expected"),
    [
        (timedelta(hours=24), (24, 0)),
        (timedelta(hours=23, minutes=59, seconds=1), (24, 0)),
        (timedelta(hours=1, minutes=30, seconds=1), (1, 31)),
        (timedelta(minutes=59), (0, 59)),
        (timedelta(seconds=1), (0, 1)),
    ],
)
def test_active_lockout_rejects_with_rounded_up_wait(
    policy: ThrottlePolicy,
    remaining: timedelta,
    expected: tuple[int, int],
) -> None:
    decision = policy.evaluate(Record(attempt_count=5, lockout_until=NOW + remaining), NOW)

    assert decision == Reject(wait_hours=expected[0], wait_minutes=expected[1])
    total = decision.wait_hours * 60 + decision.wait_minutes
    assert 0 <= total * 60 - remaining.total_seconds() < 60


def test_lockout_set_exactly_on_fifth_reissue(policy: ThrottlePolicy) -> None:
    record = Record(attempt_count=0)
    for attempt in range(1, 6):
        decision = policy.evaluate(record, NOW)
        assert not isinstance(decision, Reject)
        change = policy.apply_reissue(record, decision, NOW, NOW + timedelta(minutes=6))
        record.attempt_count = change.attempt_count
        record.lockout_until = change.lockout_until
        assert record.attempt_count == attempt
        if attempt < 5:
            assert record.lockout_until is None

    assert record.lockout_until == NOW + timedelta(hours=24)
    assert isinstance(policy.evaluate(record, NOW), Reject)


def test_reissue_after_elapsed_lockout_restarts_count(policy: ThrottlePolicy) -> None:
    record = Record(attempt_count=5, lockout_until=NOW - timedelta(minutes=1))
    decision = policy.evaluate(record, NOW)

    change = policy.apply_reissue(record, decision, NOW, NOW + timedelta(minutes=6))

    assert change.attempt_count == 1
    assert change.lockout_until is None
    assert change.expires_at == NOW + timedelta(minutes=6)


def test_apply_reissue_refuses_rejected_record(policy: ThrottlePolicy) -> None:
    record = Record(attempt_count=5, lockout_until=NOW + timedelta(hours=1))
    with pytest.raises(ValueError):
        policy.apply_reissue(record, Reject(1, 0), NOW, NOW)


def test_custom_threshold_and_lockout() -> None:
    policy = ThrottlePolicy(max_attempts=2, lockout=timedelta(hours=1))
    change = policy.apply_reissue(Record(attempt_count=1), Allow(), NOW, NOW)
    assert change.lockout_until == NOW + timedelta(hours=1)


def test_rejects_non_positive_threshold() -> None:
    with pytest.raises(ValueError):
        ThrottlePolicy(max_attempts=0)


def test_split_wait_clamps_negative() -> None:
    assert split_wait(timedelta(seconds=-30)) == (0, 0)
