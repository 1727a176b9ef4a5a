# src/notekeeper/models/__init__.py
"""SQLAlchemy models for the Notekeeper application."""

from .note import Note
from .throttled_record import RecordKind, ThrottledRecord
from .user import User

__all__ = [
    "Note",
    "RecordKind", "ThrottledRecord",
    "User",
]
