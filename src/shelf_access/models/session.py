"""Process-local session models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from shelf_access.models.user import UserStatus


class SessionState(str, Enum):
    """Lifecycle of the current-user session within one process."""

    UNKNOWN = "unknown"
    CHECKING = "checking"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionUser(BaseModel):
    """Projection of the user record held by an authenticated session."""

    id: str
    email: str
    username: str
    status: UserStatus
    created_at: datetime


class Session(BaseModel):
    """The currently authenticated user."""

    user: SessionUser
    is_admin: bool = False


class LoginResponse(BaseModel):
    """Session handed to the client that signed in, with its bearer token."""

    session: Session
    access_token: str
    token_type: str = "bearer"
