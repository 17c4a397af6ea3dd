"""Request bodies accepted by the HTTP surface."""

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    """Registration form."""

    email: str
    username: str
    password: str
    confirm_password: str | None = None


class LoginRequest(BaseModel):
    """Sign-in form."""

    email: str
    password: str


class PasswordChangeRequest(BaseModel):
    """Password change form."""

    current_password: str
    new_password: str
    confirm_password: str
