"""Async data access wrappers around SQLAlchemy sessions."""

from .note_repo import NoteRepository
from .throttle_repo import ThrottledRecordRepository
from .user_repo import UserRepository

__all__ = ["NoteRepository", "ThrottledRecordRepository", "UserRepository"]
