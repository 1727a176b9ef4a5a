"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

import re

from pydantic import BaseModel, Field

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[\W_])[A-Za-z\d\W_]{8,}$")
PASSWORD_RULES = (
    "Password must contain at least one uppercase letter, one lowercase letter, "
    "one number, and one special character"
)


def check_password_strength(value: str) -> str:
    """Validate a new password against the complexity rules."""
    if not PASSWORD_PATTERN.match(value):
        raise ValueError(PASSWORD_RULES)
    return value


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by mutating endpoints."""

    message: str = Field(..., description="Human readable outcome")


class ErrorResponse(BaseModel):
    """Body returned for every handled domain error."""

    statusCode: int
    error: str
    detail: str
    path: str
    timestamp: str
