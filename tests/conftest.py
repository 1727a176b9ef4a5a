# tests/conftest.py
from __future__ import annotations

import os
import re
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("SMTP_ENABLED", "false")

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from notekeeper.core.clock import FrozenClock, get_clock
from notekeeper.core.security import PasswordHasher, create_access_token
from notekeeper.core.settings import settings
from notekeeper.db.session import Base
from notekeeper.db.session import get_db as app_get_session
from notekeeper.main import app as fastapi_app
from notekeeper.models import User
from notekeeper.repositories import ThrottledRecordRepository, UserRepository
from notekeeper.services.account_service import AccountService, build_account_service
from notekeeper.services.challenge_store import CredentialChallengeStore
from notekeeper.services.locks import OwnerLocks
from notekeeper.services.mailer import get_notifier
from notekeeper.services.reset_store import ResetRequestStore

TEST_DB_URL = "sqlite+aiosqlite://"
START = datetime(2026, 1, 5, 9, 0, tzinfo=UTC)
PASSWORD = "Str0ng!Password"

_CODE_RE = re.compile(r">(\d{6})<")


@dataclass
class SentMail:
    address: str
    subject: str
    html: str


@dataclass
class RecordingNotifier:
    """Collects mail instead of scheduling deliveries."""

    sent: list[SentMail] = field(default_factory=list)

    def dispatch(self, address: str, subject: str, html: str) -> None:
        self.sent.append(SentMail(address, subject, html))

    def last(self, address: str, subject: str) -> SentMail:
        for mail in reversed(self.sent):
            if mail.address == address and mail.subject == subject:
                return mail
        raise AssertionError(f"no {subject!r} mail sent to {address}")

    def last_code(self, address: str) -> str:
        match = _CODE_RE.search(self.last(address, "Email verification").html)
        assert match is not None
        return match.group(1)

    def last_reset_id(self, address: str) -> str:
        html = self.last(address, "Reset Password").html
        match = re.search(re.escape(settings.reset_password_link) + r"([A-Za-z0-9_\-]+)", html)
        assert match is not None
        return match.group(1)


@pytest_asyncio.fixture()
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(START)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture()
def locks() -> OwnerLocks:
    return OwnerLocks()


@pytest.fixture()
def records(db_session: AsyncSession) -> ThrottledRecordRepository:
    return ThrottledRecordRepository(db_session)


@pytest.fixture()
def challenge_store(
    records: ThrottledRecordRepository,
    hasher: PasswordHasher,
    clock: FrozenClock,
    locks: OwnerLocks,
) -> CredentialChallengeStore:
    return CredentialChallengeStore(records, hasher, clock, locks=locks)


@pytest.fixture()
def reset_store(
    records: ThrottledRecordRepository,
    clock: FrozenClock,
    locks: OwnerLocks,
) -> ResetRequestStore:
    return ResetRequestStore(records, clock, locks=locks)


@pytest.fixture()
def account_service(
    db_session: AsyncSession,
    hasher: PasswordHasher,
    notifier: RecordingNotifier,
    clock: FrozenClock,
) -> AccountService:
    return build_account_service(
        db_session,
        hasher=hasher,
        notifier=notifier,  # type: ignore[arg-type]
        clock=clock,
        app_settings=settings,
    )


@pytest.fixture()
def make_user(
    db_session: AsyncSession,
    hasher: PasswordHasher,
) -> Callable[..., Awaitable[User]]:
    async def _make_user(
        username: str = "alice",
        email: str | None = None,
        password: str | None = PASSWORD,
        fullname: str | None = "Alice Liddell",
    ) -> User:
        return await UserRepository(db_session).create(
            username=username,
            email=email or f"{username}@example.com",
            fullname=fullname,
            password_hash=await hasher.hash(password) if password else None,
        )

    return _make_user


@pytest_asyncio.fixture()
async def test_user(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user()


@pytest.fixture()
def auth_headers(test_user: User) -> dict[str, str]:
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def app(
    session_factory: async_sessionmaker[AsyncSession],
    clock: FrozenClock,
    notifier: RecordingNotifier,
) -> Iterator[FastAPI]:
    async def _get_session_override() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[app_get_session] = _get_session_override
    fastapi_app.dependency_overrides[get_clock] = lambda: clock
    fastapi_app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
