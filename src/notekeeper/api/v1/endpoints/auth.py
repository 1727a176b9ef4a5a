"""Authentication endpoints: registration, code login and password reset."""

from __future__ import annotations

from fastapi import APIRouter, status

from notekeeper.api.v1.dependencies import AccountServiceDep, CurrentUserDep
from notekeeper.schemas.auth import (
    EmailRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    VerifyCodeRequest,
)
from notekeeper.schemas.common import MessageResponse
from notekeeper.schemas.user import UserResponse

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, accounts: AccountServiceDep) -> UserResponse:
    """Create a new account."""
    user = await accounts.register(payload)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=MessageResponse)
async def login(payload: LoginRequest, accounts: AccountServiceDep) -> MessageResponse:
    """Check the password and e-mail a one-time login code."""
    message = await accounts.login(payload.identity, payload.password)
    return MessageResponse(message=message)


@router.post("/resend-code", response_model=MessageResponse)
async def resend_code(payload: EmailRequest, accounts: AccountServiceDep) -> MessageResponse:
    """Send a fresh login code; throttled after repeated requests."""
    message = await accounts.resend_code(payload.email)
    return MessageResponse(message=message)


@router.post("/verify-code", response_model=TokenResponse)
async def verify_code(payload: VerifyCodeRequest, accounts: AccountServiceDep) -> TokenResponse:
    """Exchange a valid login code for a bearer token."""
    token = await accounts.verify_code(payload.email, payload.code)
    return TokenResponse(access_token=token)


@router.post("/send-forgot-password-link", response_model=MessageResponse)
async def send_forgot_password_link(
    payload: EmailRequest,
    accounts: AccountServiceDep,
) -> MessageResponse:
    """E-mail a single-use password reset link."""
    message = await accounts.request_password_reset(payload.email)
    return MessageResponse(message=message)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    accounts: AccountServiceDep,
) -> MessageResponse:
    """Set a new password through a reset link."""
    message = await accounts.reset_password(
        payload.request_id, payload.password, payload.confirm_password
    )
    return MessageResponse(message=message)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUserDep) -> UserResponse:
    return UserResponse.model_validate(current_user)
