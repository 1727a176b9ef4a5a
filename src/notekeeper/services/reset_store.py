"""Password reset requests delivered as single-use links."""

from __future__ import annotations

import logging
from datetime import datetime

from notekeeper.core.clock import Clock
from notekeeper.core.errors import ExpiredError, NotFoundError, TooManyAttemptsError
from notekeeper.core.security import generate_request_id, hash_token
from notekeeper.models.throttled_record import RecordKind, ThrottledRecord
from notekeeper.repositories.throttle_repo import ThrottledRecordRepository
from notekeeper.services.locks import OwnerLocks, owner_locks
from notekeeper.services.throttle import Reject, ThrottlePolicy

_KIND = RecordKind.PASSWORD_RESET


class ResetRequestStore:
    """Holds at most one active reset request per account.

    The request id travels in the reset link; only its SHA-256 digest is kept,
    so every create or renewal hands out a new id and invalidates the old link.
    """

    def __init__(
        self,
        repository: ThrottledRecordRepository,
        clock: Clock,
        *,
        policy: ThrottlePolicy | None = None,
        locks: OwnerLocks | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.repository = repository
        self.clock = clock
        self.policy = policy or ThrottlePolicy()
        self.locks = locks or owner_locks
        self.logger = logger or logging.getLogger(__name__)

    async def create_or_renew(self, owner_id: str, expires_at: datetime) -> str:
        """Open or renew the owner's reset request and return its new id.

        Raises:
            TooManyAttemptsError: Renewal attempted during a lockout window.
        """
        async with self.locks.hold(_KIND.value, owner_id):
            request_id = generate_request_id()
            record = await self.repository.find_active_by_owner(owner_id, _KIND)

            if record is None:
                await self.repository.create(
                    ThrottledRecord(
                        owner_id=owner_id,
                        kind=_KIND.value,
                        secret_hash=hash_token(request_id),
                        expires_at=expires_at,
                        attempt_count=1,
                        lockout_until=None,
                    )
                )
                self.logger.info("Created reset password request for user %s", owner_id)
                return request_id

            now = self.clock.now()
            decision = self.policy.evaluate(record, now)
            if isinstance(decision, Reject):
                self.logger.warning("Reset password request locked out for user %s", owner_id)
                raise TooManyAttemptsError(decision.wait_hours, decision.wait_minutes)

            change = self.policy.apply_reissue(record, decision, now, expires_at)
            await self.repository.update(
                record.id,
                secret_hash=hash_token(request_id),
                **change.as_fields(),
            )
            self.logger.info(
                "Renewed reset password request for user %s (attempt %d)",
                owner_id,
                change.attempt_count,
            )
            return request_id

    async def resolve(self, request_id: str) -> str:
        """Return the owner of a live reset request without consuming it.

        Raises:
            NotFoundError: Unknown request id.
            ExpiredError: The link is past its expiry.
        """
        record = await self.repository.find_by_secret(_KIND, hash_token(request_id))
        if record is None:
            self.logger.error("Reset password request not found")
            raise NotFoundError("Reset password request not found")

        if self.clock.now() > record.expires_at:
            self.logger.warning("Reset password link expired for user %s", record.owner_id)
            raise ExpiredError("Reset password link has expired. Please request a new link.")

        return record.owner_id

    async def consume(self, request_id: str) -> str:
        """Resolve a live reset request and delete it; return its owner.

        The check and the delete run under the owner lock, so a link can be
        used exactly once even when submitted twice at the same time.

        Raises:
            NotFoundError: Unknown or already consumed request id.
            ExpiredError: The link is past its expiry.
        """
        owner_id = await self.resolve(request_id)
        async with self.locks.hold(_KIND.value, owner_id):
            # A concurrent consume or renewal may have replaced the request.
            await self.resolve(request_id)
            if await self.delete(owner_id) != 1:
                self.logger.warning("Reset password request for user %s already used", owner_id)
                raise NotFoundError("Reset password request not found")
        return owner_id

    async def delete(self, owner_id: str) -> int:
        """Remove the owner's reset request; return the number of rows deleted."""
        self.logger.info("Deleting reset password request for user %s", owner_id)
        return await self.repository.delete(owner_id, _KIND)
