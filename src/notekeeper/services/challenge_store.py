"""One-time login codes sent after a successful password check."""

from __future__ import annotations

import logging
from datetime import timedelta

from notekeeper.core.clock import Clock
from notekeeper.core.errors import (
    ConflictError,
    ExpiredError,
    MismatchError,
    NotFoundError,
    TooManyAttemptsError,
)
from notekeeper.core.security import PasswordHasher, generate_numeric_code
from notekeeper.models.throttled_record import RecordKind, ThrottledRecord
from notekeeper.repositories.throttle_repo import ThrottledRecordRepository
from notekeeper.services.locks import OwnerLocks, owner_locks
from notekeeper.services.throttle import Reject, ThrottlePolicy

DEFAULT_CODE_LENGTH = 6
DEFAULT_CODE_TTL = timedelta(minutes=6)

_KIND = RecordKind.LOGIN_CODE


class CredentialChallengeStore:
    """Holds at most one active login code per account.

    Codes are only ever returned in clear text to the caller, which delivers
    them to the user; the store keeps a bcrypt digest.
    """

    def __init__(
        self,
        repository: ThrottledRecordRepository,
        hasher: PasswordHasher,
        clock: Clock,
        *,
        policy: ThrottlePolicy | None = None,
        code_length: int = DEFAULT_CODE_LENGTH,
        code_ttl: timedelta = DEFAULT_CODE_TTL,
        locks: OwnerLocks | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.repository = repository
        self.hasher = hasher
        self.clock = clock
        self.policy = policy or ThrottlePolicy()
        self.code_length = code_length
        self.code_ttl = code_ttl
        self.locks = locks or owner_locks
        self.logger = logger or logging.getLogger(__name__)

    async def issue_initial(self, owner_id: str) -> str:
        """Create the owner's first code and return it in clear text.

        Raises:
            ConflictError: A code is already active; use ``reissue`` instead.
        """
        async with self.locks.hold(_KIND.value, owner_id):
            existing = await self.repository.find_active_by_owner(owner_id, _KIND)
            if existing is not None:
                self.logger.warning("Login code already active for user %s", owner_id)
                raise ConflictError("A verification code is already active for this account")
            return await self._create(owner_id)

    async def reissue(self, owner_id: str) -> str:
        """Replace the owner's code with a fresh one, subject to throttling.

        Raises:
            NotFoundError: The owner has not completed the password step.
            TooManyAttemptsError: A lockout window is active.
        """
        async with self.locks.hold(_KIND.value, owner_id):
            record = await self.repository.find_active_by_owner(owner_id, _KIND)
            if record is None:
                self.logger.warning("No login code for user %s, password step required", owner_id)
                raise NotFoundError("Verification code not found, please log in first")
            return await self._renew(record)

    async def issue_or_reissue(self, owner_id: str) -> str:
        """Issue a first code, or reissue when one is already active.

        The lookup and the write happen under one owner lock, so concurrent
        logins never race into a conflict.

        Raises:
            TooManyAttemptsError: A code exists and a lockout window is active.
        """
        async with self.locks.hold(_KIND.value, owner_id):
            record = await self.repository.find_active_by_owner(owner_id, _KIND)
            if record is None:
                return await self._create(owner_id)
            return await self._renew(record)

    async def verify(self, owner_id: str, code: str) -> ThrottledRecord:
        """Check ``code`` against the owner's active code without consuming it.

        Expiry is checked before the digest comparison, so a correct but stale
        code is still reported as expired.

        Raises:
            NotFoundError: No active code.
            ExpiredError: The code is past its expiry.
            MismatchError: The code is wrong.
        """
        record = await self.repository.find_active_by_owner(owner_id, _KIND)
        if record is None:
            self.logger.warning("Login code for user %s not found", owner_id)
            raise NotFoundError("Verification code not found")

        if self.clock.now() > record.expires_at:
            self.logger.warning(
                "Login code for user %s expired at %s", owner_id, record.expires_at.isoformat()
            )
            raise ExpiredError("Verification code expired")

        if not await self.hasher.verify(code, record.secret_hash):
            self.logger.warning("Invalid login code submitted for user %s", owner_id)
            raise MismatchError("Invalid verification code")

        return record

    async def consume(self, owner_id: str, code: str) -> ThrottledRecord:
        """Verify ``code`` and delete it, so it can be used exactly once.

        Raises the same errors as ``verify``. A code consumed by a concurrent
        caller is reported as not found.
        """
        async with self.locks.hold(_KIND.value, owner_id):
            record = await self.verify(owner_id, code)
            deleted = await self.repository.delete(owner_id, _KIND)
            if deleted != 1:
                self.logger.warning("Login code for user %s already consumed", owner_id)
                raise NotFoundError("Verification code not found")
            self.logger.info("Consumed login code for user %s", owner_id)
            return record

    async def discard(self, owner_id: str) -> None:
        """Delete the owner's code; no-op when there is none."""
        async with self.locks.hold(_KIND.value, owner_id):
            deleted = await self.repository.delete(owner_id, _KIND)
        if deleted:
            self.logger.info("Deleted login code for user %s", owner_id)

    async def _create(self, owner_id: str) -> str:
        code = generate_numeric_code(self.code_length)
        now = self.clock.now()
        await self.repository.create(
            ThrottledRecord(
                owner_id=owner_id,
                kind=_KIND.value,
                secret_hash=await self.hasher.hash(code),
                expires_at=now + self.code_ttl,
                attempt_count=0,
                lockout_until=None,
            )
        )
        self.logger.info("Issued login code for user %s", owner_id)
        return code

    async def _renew(self, record: ThrottledRecord) -> str:
        now = self.clock.now()
        decision = self.policy.evaluate(record, now)
        if isinstance(decision, Reject):
            self.logger.warning("Login code reissue locked out for user %s", record.owner_id)
            raise TooManyAttemptsError(decision.wait_hours, decision.wait_minutes)

        change = self.policy.apply_reissue(record, decision, now, now + self.code_ttl)
        code = generate_numeric_code(self.code_length)
        await self.repository.update(
            record.id,
            secret_hash=await self.hasher.hash(code),
            **change.as_fields(),
        )
        if change.attempt_count >= self.policy.max_attempts:
            self.logger.info(
                "User %s reached %d login code requests, locked until %s",
                record.owner_id,
                change.attempt_count,
                change.lockout_until.isoformat(),
            )
        return code
