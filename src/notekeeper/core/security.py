"""Hashing, one-time secret generation and bearer token helpers."""
from __future__ import annotations

import asyncio
import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from notekeeper.core.settings import settings


class PasswordHasher:
    """Slow hash used for passwords and one-time login codes.

    bcrypt is CPU bound, so both operations run in a worker thread to keep the
    event loop responsive.
    """

    def __init__(self, rounds: int | None = None) -> None:
        self.rounds = rounds if rounds is not None else settings.password_hash_rounds

    def _hash_sync(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def _verify_sync(plaintext: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            # Malformed stored digest never matches.
            return False

    async def hash(self, plaintext: str) -> str:
        """Return a salted bcrypt digest of ``plaintext``."""
        return await asyncio.to_thread(self._hash_sync, plaintext)

    async def verify(self, plaintext: str, digest: str) -> bool:
        """Compare ``plaintext`` against ``digest`` in constant time."""
        return await asyncio.to_thread(self._verify_sync, plaintext, digest)


def hash_token(token: str) -> str:
    """Return a SHA-256 hex digest of an opaque, high-entropy token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_numeric_code(length: int) -> str:
    """Return a zero-padded random numeric code of ``length`` digits."""
    if length <= 0:
        return ""
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def generate_request_id() -> str:
    """Return a URL-safe identifier suitable for single-use links."""
    return secrets.token_urlsafe(32)


def create_access_token(subject: str, extra_claims: dict[str, Any] | None = None) -> str:
    """Create JWT access token for user authentication."""
    to_encode: dict[str, Any] = {"sub": subject}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> str | None:
    """Return the subject of a valid token, or None when it cannot be trusted."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) else None
