"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.clock import Clock, get_clock
from notekeeper.core.security import PasswordHasher, decode_access_token
from notekeeper.core.settings import settings
from notekeeper.db.session import get_db
from notekeeper.models import User
from notekeeper.repositories import NoteRepository, UserRepository
from notekeeper.services.account_service import AccountService, build_account_service
from notekeeper.services.mailer import Notifier, get_notifier
from notekeeper.services.note_service import NoteService

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

_HASHER = PasswordHasher()


def get_password_hasher() -> PasswordHasher:
    """Return the shared password hasher."""
    return _HASHER


# Type aliases for dependency injection
SessionDep = Annotated[AsyncSession, Depends(get_db)]
ClockDep = Annotated[Clock, Depends(get_clock)]
NotifierDep = Annotated[Notifier, Depends(get_notifier)]
HasherDep = Annotated[PasswordHasher, Depends(get_password_hasher)]


def get_account_service(
    db: SessionDep,
    clock: ClockDep,
    notifier: NotifierDep,
    hasher: HasherDep,
) -> AccountService:
    """Build the account service bound to the request's session."""
    return build_account_service(
        db,
        hasher=hasher,
        notifier=notifier,
        clock=clock,
        app_settings=settings,
    )


def get_note_service(db: SessionDep) -> NoteService:
    return NoteService(NoteRepository(db))


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from the bearer token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If the token is invalid or the user no longer exists
    """
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]
