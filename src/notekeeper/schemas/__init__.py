"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import (
    EmailRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    VerifyCodeRequest,
)
from .common import ErrorResponse, MessageResponse
from .note import NoteCreate, NotePage, NoteResponse, NoteUpdate
from .user import UpdatePasswordRequest, UpdateProfileRequest, UserResponse

__all__ = [
    "EmailRequest", "LoginRequest", "RegisterRequest", "ResetPasswordRequest",
    "TokenResponse", "VerifyCodeRequest",
    "ErrorResponse", "MessageResponse",
    "NoteCreate", "NotePage", "NoteResponse", "NoteUpdate",
    "UpdatePasswordRequest", "UpdateProfileRequest", "UserResponse",
]
