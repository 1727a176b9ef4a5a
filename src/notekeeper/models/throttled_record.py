# src/notekeeper/models/throttled_record.py
"""Single-use secrets with attempt counting and lockout windows."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.db.session import Base
from notekeeper.db.time import UTCDateTime, utcnow


class RecordKind(str, enum.Enum):
    """Which flow a throttled record belongs to."""

    LOGIN_CODE = "login_code"
    PASSWORD_RESET = "password_reset"


class ThrottledRecord(Base):
    """The one active login code or reset request of an account.

    Login codes keep a bcrypt digest in ``secret_hash``; reset requests keep a
    SHA-256 digest so they can be looked up by the id carried in the link.
    """

    __tablename__ = "throttled_record"
    __table_args__ = (UniqueConstraint("owner_id", "kind", name="uq_throttled_record_owner_kind"),)

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    owner_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    secret_hash: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    attempt_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    lockout_until: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
