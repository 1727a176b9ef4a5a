# src/notekeeper/models/user.py
"""SQLAlchemy model for registered accounts."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.db.session import Base
from notekeeper.db.time import UTCDateTime, utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Account identified by e-mail and username."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    fullname: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Accounts created without a password must go through the reset flow first.
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)

    deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
