"""Business logic services for the notekeeper application."""

from .account_service import AccountService, build_account_service
from .challenge_store import CredentialChallengeStore
from .mailer import Notifier, get_notifier
from .note_service import NoteService
from .reset_store import ResetRequestStore
from .throttle import Allow, AllowAndResetCount, Reject, ThrottlePolicy

__all__ = [
    "AccountService",
    "Allow",
    "AllowAndResetCount",
    "CredentialChallengeStore",
    "NoteService",
    "Notifier",
    "Reject",
    "ResetRequestStore",
    "ThrottlePolicy",
    "build_account_service",
    "get_notifier",
]
