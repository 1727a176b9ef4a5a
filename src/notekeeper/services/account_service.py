"""Account orchestration: registration, code login, password management.

``AccountService`` owns the two throttled stores and is the only component
that talks to the notifier; the stores never call back into it.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.clock import Clock
from notekeeper.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationFailedError,
)
from notekeeper.core.security import PasswordHasher, create_access_token
from notekeeper.core.settings import Settings, settings
from notekeeper.models.user import User
from notekeeper.repositories.throttle_repo import ThrottledRecordRepository
from notekeeper.repositories.user_repo import UserRepository
from notekeeper.schemas.auth import RegisterRequest
from notekeeper.services.challenge_store import CredentialChallengeStore
from notekeeper.services.mail_templates import reset_password_email, verification_code_email
from notekeeper.services.locks import OwnerLocks
from notekeeper.services.mailer import Notifier
from notekeeper.services.reset_store import ResetRequestStore
from notekeeper.services.throttle import ThrottlePolicy

__all__ = ["AccountService", "build_account_service"]

CODE_SENT_MESSAGE = (
    "A one-time password (OTP) has been sent to your email address. "
    "Please check your mail and follow the instructions to complete the process."
)


def _same(first: str, second: str) -> bool:
    return first.strip() == second.strip()


class AccountService:
    """Use cases behind the auth and users endpoints."""

    def __init__(
        self,
        users: UserRepository,
        challenges: CredentialChallengeStore,
        resets: ResetRequestStore,
        hasher: PasswordHasher,
        notifier: Notifier,
        clock: Clock,
        *,
        app_settings: Settings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.users = users
        self.challenges = challenges
        self.resets = resets
        self.hasher = hasher
        self.notifier = notifier
        self.clock = clock
        self.settings = app_settings or settings
        self.logger = logger or logging.getLogger(__name__)

    async def register(self, payload: RegisterRequest) -> User:
        """Create an account after uniqueness and confirmation checks.

        Raises:
            ValidationFailedError: Password confirmation differs.
            ConflictError: E-mail or username already taken.
        """
        self.logger.info("Registering user %s", payload.username)
        if not _same(payload.password, payload.confirm_password):
            self.logger.warning("Password and confirm password do not match")
            message = "Password and confirm password should be the same"
            raise ValidationFailedError({"password": message, "confirm_password": message})

        if await self.users.email_taken(payload.email):
            self.logger.warning("Email %s already registered", payload.email)
            raise ConflictError("Email already exist")
        if await self.users.get_by_username(payload.username):
            self.logger.warning("Username %s already registered", payload.username)
            raise ConflictError("Username already exist")

        return await self.users.create(
            email=payload.email.strip().lower(),
            username=payload.username.strip(),
            fullname=payload.fullname.strip() if payload.fullname else None,
            password_hash=await self.hasher.hash(payload.password),
        )

    async def login(self, identity: str, password: str) -> str:
        """Check the password and e-mail a one-time code.

        A second login while a code is active counts as a reissue, so the
        attempt counter keeps counting.
        """
        self.logger.info("Logging in user %s", identity)
        user = await self.users.get_by_email(identity)
        if user is None:
            self.logger.error("User with %s not found", identity)
            raise NotFoundError("No account, register please")

        if not user.password_hash:
            self.logger.warning("User %s has no password yet", user.id)
            raise ForbiddenError("Please click on forget password to set up your password")

        if not await self.hasher.verify(password, user.password_hash):
            self.logger.warning("Invalid password for user %s", user.id)
            raise InvalidCredentialsError("Invalid credentials")

        code = await self.challenges.issue_or_reissue(user.id)
        self._send_code(user, code)
        return CODE_SENT_MESSAGE

    async def resend_code(self, email: str) -> str:
        """Issue a fresh code for a user who already passed the password step."""
        user = await self.users.get_by_email(email)
        if user is None:
            self.logger.error("User with %s not found", email)
            raise NotFoundError("Verification code not found")

        code = await self.challenges.reissue(user.id)
        self._send_code(user, code)
        return CODE_SENT_MESSAGE

    async def verify_code(self, email: str, code: str) -> str:
        """Consume the one-time code and return a bearer token."""
        user = await self.users.get_by_email(email)
        if user is None:
            self.logger.error("Verification requested for unknown email %s", email)
            raise NotFoundError("Verification code not found")

        await self.challenges.consume(user.id, code.strip())
        self.logger.info("User %s verified login code", user.id)
        return create_access_token(user.id, {"email": user.email})

    async def request_password_reset(self, email: str) -> str:
        """Open or renew a reset request and e-mail the link."""
        user = await self.users.get_by_email(email)
        if user is None:
            self.logger.error("User not found")
            raise NotFoundError("User not found")

        expires_at = self.clock.now() + timedelta(minutes=self.settings.reset_link_ttl_minutes)
        request_id = await self.resets.create_or_renew(user.id, expires_at)

        name = user.fullname.strip() if user.fullname else "User"
        subject, html = reset_password_email(
            name,
            user.email,
            f"{self.settings.reset_password_link}{request_id}",
            self.settings.landing_page_link,
            self.clock.now(),
        )
        self.notifier.dispatch(user.email, subject, html)
        return "Link sent successfully"

    async def reset_password(self, request_id: str, password: str, confirm_password: str) -> str:
        """Replace the password of the account behind a live reset link."""
        if not _same(password, confirm_password):
            self.logger.warning("Password and confirm password do not match")
            message = "Password and confirm password should be the same"
            raise ValidationFailedError({"password": message, "confirm_password": message})

        owner_id = await self.resets.consume(request_id)
        user = await self.get_current_user(owner_id)

        await self.users.update(user, password_hash=await self.hasher.hash(password))
        self.logger.info("Password changed through reset link for user %s", owner_id)
        return "Password change successfully"

    async def get_current_user(self, user_id: str) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            self.logger.warning("User with ID %s not found", user_id)
            raise NotFoundError("User not found")
        return user

    async def update_password(
        self,
        user_id: str,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> str:
        """Change the password of an authenticated user."""
        errors: dict[str, str] = {}
        if current_password == new_password:
            errors["current_password"] = "Old password and new password can't be the same"
        if not _same(new_password, confirm_password):
            message = "New password and confirm password should be the same"
            errors["new_password"] = errors["confirm_password"] = message
        if errors:
            self.logger.warning("Validation errors: %s", sorted(errors))
            raise ValidationFailedError(errors)

        user = await self.get_current_user(user_id)
        if not user.password_hash or not await self.hasher.verify(
            current_password, user.password_hash
        ):
            self.logger.warning("Current password invalid for user %s", user_id)
            raise InvalidCredentialsError("Current Password Invalid")

        await self.users.update(user, password_hash=await self.hasher.hash(new_password))
        return "Password updated successfully"

    async def update_profile(
        self,
        user_id: str,
        username: str | None,
        email: str | None,
    ) -> User:
        """Change username and/or e-mail, keeping both unique."""
        user = await self.get_current_user(user_id)

        if email:
            holder = await self.users.email_taken(email)
            if holder is not None and holder.id != user_id:
                raise ConflictError("Email already exist")
        if username:
            holder = await self.users.get_by_username(username)
            if holder is not None and holder.id != user_id:
                raise ConflictError("Username already exist")

        self.logger.info("Updating profile of user %s", user_id)
        return await self.users.update(
            user,
            username=username.strip() if username else user.username,
            email=email.strip().lower() if email else user.email,
        )

    def _send_code(self, user: User, code: str) -> None:
        name = user.username.strip() if user.username else "User"
        subject, html = verification_code_email(
            name, code, self.settings.landing_page_link, self.clock.now()
        )
        self.notifier.dispatch(user.email, subject, html)


def build_account_service(
    session: AsyncSession,
    *,
    hasher: PasswordHasher,
    notifier: Notifier,
    clock: Clock,
    app_settings: Settings | None = None,
    locks: OwnerLocks | None = None,
) -> AccountService:
    """Wire repositories, stores and policy for one database session."""
    cfg = app_settings or settings
    policy = ThrottlePolicy(
        max_attempts=cfg.throttle_max_attempts,
        lockout=timedelta(hours=cfg.throttle_lockout_hours),
    )
    records = ThrottledRecordRepository(session)
    challenges = CredentialChallengeStore(
        records,
        hasher,
        clock,
        policy=policy,
        code_length=cfg.login_code_length,
        code_ttl=timedelta(minutes=cfg.login_code_ttl_minutes),
        locks=locks,
    )
    resets = ResetRequestStore(records, clock, policy=policy, locks=locks)
    return AccountService(
        UserRepository(session),
        challenges,
        resets,
        hasher,
        notifier,
        clock,
        app_settings=cfg,
    )
