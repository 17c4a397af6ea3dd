"""Result models returned across the orchestrator boundary."""

from pydantic import BaseModel, Field

from shelf_access.models.user import UserStatus


class AuthResult(BaseModel):
    """Outcome of a session operation: an error message or nothing."""

    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class UsernameCheck(BaseModel):
    """Username policy verdict with every violated rule."""

    valid: bool
    issues: list[str] = Field(default_factory=list)


class PasswordCheck(BaseModel):
    """Password strength verdict with every violated rule."""

    strong: bool
    issues: list[str] = Field(default_factory=list)


class ApprovalOutcome(BaseModel):
    """Outcome of an administrator status transition."""

    user_id: str
    status: UserStatus
    error: str | None = None
    # None when no confirmation was attempted (reject, or failed update)
    credential_confirmed: bool | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RegistrationResult(BaseModel):
    """Outcome of the full registration flow."""

    error: str | None = None
    email_valid: bool = True
    username_issues: list[str] = Field(default_factory=list)
    password_issues: list[str] = Field(default_factory=list)
    invalid: bool = False  # Rejected locally, before any network call
    throttled: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None
