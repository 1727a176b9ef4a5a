"""Authentication request/response schemas."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from notekeeper.schemas.common import check_password_strength


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    fullname: str | None = Field(None, min_length=2, max_length=255, description="Full name")
    username: str = Field(..., min_length=2, max_length=150, description="Unique username")
    email: EmailStr = Field(..., description="E-mail address used to sign in")
    password: str = Field(..., min_length=12, max_length=64, description="Account password")
    confirm_password: str = Field(..., min_length=1, max_length=64)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Enforce the password complexity rules."""
        return check_password_strength(v)


class LoginRequest(BaseModel):
    """Password step of the login flow."""

    identity: EmailStr = Field(..., description="E-mail address of the account")
    password: str = Field(..., min_length=1, max_length=64)


class EmailRequest(BaseModel):
    """Request addressed to an account by e-mail (code resend, reset link)."""

    email: EmailStr


class VerifyCodeRequest(BaseModel):
    """Second step of the login flow."""

    email: EmailStr
    code: str = Field(..., min_length=1, max_length=16, description="One-time code from the e-mail")


class ResetPasswordRequest(BaseModel):
    """Password replacement through a reset link."""

    request_id: str = Field(..., min_length=1, max_length=128, description="Id from the reset link")
    password: str = Field(..., min_length=8, max_length=64)
    confirm_password: str = Field(..., min_length=1, max_length=64)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)


class TokenResponse(BaseModel):
    """Response returned after a successful code verification."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type (always 'bearer')")
