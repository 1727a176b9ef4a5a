"""User-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from notekeeper.schemas.common import check_password_strength


class UserResponse(BaseModel):
    """Public view of an account."""

    id: str
    username: str
    email: str
    fullname: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UpdatePasswordRequest(BaseModel):
    """Password change by an authenticated user."""

    current_password: str = Field(..., min_length=1, max_length=64)
    new_password: str = Field(..., min_length=8, max_length=64)
    confirm_password: str = Field(..., min_length=1, max_length=64)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return check_password_strength(v)


class UpdateProfileRequest(BaseModel):
    """Schema for updating user profile information."""

    username: str | None = Field(None, min_length=2, max_length=150)
    email: EmailStr | None = None
