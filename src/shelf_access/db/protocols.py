"""Collaborator contracts consumed by the orchestrator.

Implementations raise GatewayError / StoreError on failure. Absence is
reported as None, never as an exception.
"""

from typing import Protocol

from shelf_access.models.identity import Identity
from shelf_access.models.security import LimitDecision, SecurityLogEntry
from shelf_access.models.user import UserRecord, UserStatus


class CredentialGateway(Protocol):
    """Protocol for the identity/credential provider."""

    async def authenticate(self, email: str, password: str) -> Identity:
        """Verify credentials and open a provider session."""
        ...

    async def create_identity(
        self,
        email: str,
        password: str,
        metadata: dict,
    ) -> Identity | None:
        """Create an identity; None if the provider returned no user."""
        ...

    async def get_current_session(self) -> Identity | None:
        """Return the identity bound to a live provider session, if any."""
        ...

    async def invalidate_session(self) -> None:
        """Sign the provider session out."""
        ...

    async def update_credential(self, new_password: str) -> None:
        """Rotate the password of the signed-in identity."""
        ...

    async def confirm_identity(self, identity_id: str) -> None:
        """Mark an identity confirmed so it can sign in."""
        ...


class DirectoryStore(Protocol):
    """Protocol for the durable user, log and rate-limit store."""

    async def upsert_user_record(self, record: UserRecord) -> None:
        """Insert or replace a user record keyed by id."""
        ...

    async def get_user_record(self, user_id: str) -> UserRecord | None:
        """Fetch a user record by id."""
        ...

    async def update_user_status(self, user_id: str, status: UserStatus) -> None:
        """Set the approval status of a user record."""
        ...

    async def list_user_records(self) -> list[UserRecord]:
        """List user records, newest first."""
        ...

    async def check_registration_limit(
        self,
        origin: str,
        email: str,
    ) -> LimitDecision:
        """Ask the rate limiter whether (origin, email) may register."""
        ...

    async def record_registration_attempt(
        self,
        origin: str,
        email: str,
        success: bool,
    ) -> None:
        """Increment the rolling registration counters."""
        ...

    async def append_security_log(self, entry: SecurityLogEntry) -> None:
        """Append one security event."""
        ...
