"""Data access helpers for user accounts."""
from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.models.user import User

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, user_id: str) -> User | None:
        """Return a live (not deleted) user by identifier."""
        result = await self.session.execute(
            select(User).where(User.id == user_id, User.deleted.is_(False))
        )
        return result.scalars().first()

    async def get_by_email(self, email: str) -> User | None:
        """Return a live user by e-mail, ignoring case and surrounding blanks."""
        result = await self.session.execute(
            select(User).where(
                func.lower(User.email) == email.strip().lower(),
                User.deleted.is_(False),
            )
        )
        return result.scalars().first()

    async def get_by_username(self, username: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.username == username.strip())
        )
        return result.scalars().first()

    async def email_taken(self, email: str) -> User | None:
        """Return any user (deleted or not) already holding ``email``."""
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalars().first()

    async def create(self, **fields: Any) -> User:
        """Insert a new user and return the persisted ORM instance."""
        user = User(**fields)
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def update(self, user: User, **fields: Any) -> User:
        """Apply partial updates to an existing user."""
        for key, value in fields.items():
            setattr(user, key, value)
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user
