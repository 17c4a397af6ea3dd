"""Pydantic models for Shelf Access - the contracts."""

from shelf_access.models.identity import Identity
from shelf_access.models.requests import (
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
)
from shelf_access.models.results import (
    ApprovalOutcome,
    AuthResult,
    PasswordCheck,
    RegistrationResult,
    UsernameCheck,
)
from shelf_access.models.security import LimitDecision, SecurityLogEntry
from shelf_access.models.session import LoginResponse, Session, SessionState, SessionUser
from shelf_access.models.user import UserListing, UserRecord, UserStats, UserStatus

__all__ = [
    "ApprovalOutcome",
    "AuthResult",
    "Identity",
    "LimitDecision",
    "LoginRequest",
    "LoginResponse",
    "PasswordChangeRequest",
    "PasswordCheck",
    "RegisterRequest",
    "RegistrationResult",
    "SecurityLogEntry",
    "Session",
    "SessionState",
    "SessionUser",
    "UserListing",
    "UserRecord",
    "UserStats",
    "UserStatus",
    "UsernameCheck",
]
