"""Session/identity orchestrator (current user of this process).

Bridges the credential provider and the directory store. Sign-in is gated
on the user record's approval status; the provider alone never decides
whether an account may be used.

No exception crosses this boundary: every operation returns an AuthResult
(or nothing) and converts provider and store failures to messages.
"""

import logging
import secrets
from datetime import UTC, datetime

from shelf_access.db.protocols import CredentialGateway, DirectoryStore
from shelf_access.exceptions import GatewayError
from shelf_access.manager.best_effort import best_effort
from shelf_access.models.identity import Identity
from shelf_access.models.results import AuthResult
from shelf_access.models.session import Session, SessionState, SessionUser
from shelf_access.models.user import UserRecord, UserStatus

logger = logging.getLogger(__name__)

UNKNOWN_USERNAME = "unknown"

# User-facing messages
REGISTRATION_FAILED = "Registration failed, please try again"
RECORD_CREATE_FAILED = "Could not create user record"
REGISTRATION_ERROR = "An error occurred during registration"
SIGN_IN_FAILED = "Sign-in failed"
USER_RECORD_MISSING = "User record missing"
NOT_APPROVED = "Account not yet approved, please wait for administrator review"
SIGN_IN_ERROR = "An error occurred during sign-in"
CHANGE_PASSWORD_FAILED = "Failed to change password"


def is_admin(email: str | None, admin_email: str | None) -> bool:
    """Whether an email is the configured administrator address.

    Case-sensitive; an unset administrator address matches nobody.
    """
    return bool(admin_email) and email == admin_email


class SessionOrchestrator:
    """Owns the current-user session of one process.

    State machine: UNKNOWN -> CHECKING -> {ANONYMOUS, AUTHENTICATED}.
    Instances are created explicitly and handed to consumers; there is no
    ambient global lookup.
    """

    def __init__(
        self,
        gateway: CredentialGateway,
        store: DirectoryStore,
        admin_email: str | None = None,
    ) -> None:
        self.gateway = gateway
        self.store = store
        self.admin_email = admin_email
        self.state = SessionState.UNKNOWN
        self._session: Session | None = None
        self._token: str | None = None
        self._alive = True

    # -------------------------------------------------------------------------
    # Session state
    # -------------------------------------------------------------------------

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def session_token(self) -> str | None:
        return self._token

    @property
    def user(self) -> SessionUser | None:
        return self._session.user if self._session else None

    @property
    def is_admin(self) -> bool:
        return self._session.is_admin if self._session else False

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED and self._session is not None

    def holds_token(self, token: str | None) -> bool:
        """Whether a bearer token belongs to the current session."""
        if not token or not self._token or not self.is_authenticated:
            return False
        return secrets.compare_digest(token, self._token)

    def _authenticate(self, user: SessionUser, token: str | None) -> None:
        self._session = Session(user=user, is_admin=is_admin(user.email, self.admin_email))
        self._token = token
        self.state = SessionState.AUTHENTICATED
        logger.info(f"Session established for {user.email} (admin={self._session.is_admin})")

    def _clear(self) -> None:
        self._session = None
        self._token = None
        self.state = SessionState.ANONYMOUS

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def initialize(self) -> SessionState:
        """Restore the session from a live provider session, if any.

        Any error leaves the orchestrator anonymous; the next stop is the
        login page, not an error page. A check that settles after close()
        (or after a sign-in that raced it) is discarded.

        Returns:
            The resulting session state
        """
        if not self._alive:
            return self.state

        self.state = SessionState.CHECKING
        try:
            identity = await self.gateway.get_current_session()
        except Exception as e:
            logger.error(f"Session check failed: {e}")
            identity = None

        if not self._alive or self.state != SessionState.CHECKING:
            logger.debug("Discarding session check result for stale orchestrator")
            return self.state

        if identity is None:
            logger.debug("No existing session found")
            self._clear()
            return self.state

        self._authenticate(self._user_from_identity(identity), identity.session_token)
        return self.state

    async def close(self) -> None:
        """Tear down local state; results still in flight are discarded."""
        self._alive = False
        self._clear()

    def _user_from_identity(self, identity: Identity) -> SessionUser:
        """Synthesize the session user from identity claims alone."""
        return SessionUser(
            id=identity.id,
            email=identity.email,
            username=identity.metadata.get("username") or UNKNOWN_USERNAME,
            status=UserStatus.APPROVED,
            created_at=identity.created_at or datetime.now(UTC),
        )

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def sign_up(self, email: str, username: str, password: str) -> AuthResult:
        """Create an identity and its pending user record.

        Validation is the caller's job and must already have passed.

        Args:
            email: Account email
            username: Display name
            password: Account password

        Returns:
            AuthResult; provider errors are returned verbatim
        """
        try:
            try:
                identity = await self.gateway.create_identity(
                    email,
                    password,
                    {"username": username},
                )
            except GatewayError as e:
                return AuthResult(error=e.message)

            if identity is None:
                return AuthResult(error=REGISTRATION_FAILED)

            now = datetime.now(UTC)
            record = UserRecord(
                id=identity.id,
                email=email,
                username=username,
                status=UserStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            try:
                await self.store.upsert_user_record(record)
            except Exception as e:
                # Identity exists without a record; left for manual remediation
                logger.error(f"User record write failed for identity {identity.id}: {e}")
                return AuthResult(error=RECORD_CREATE_FAILED)

            logger.info(f"Registered {email} as pending ({identity.id})")
            return AuthResult()
        except Exception as e:
            logger.error(f"Sign up error: {e}")
            return AuthResult(error=REGISTRATION_ERROR)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Verify credentials, then admit only approved accounts.

        An unapproved account has its fresh provider session signed out
        immediately so no live session outlasts the rejection.

        Args:
            email: Account email
            password: Account password

        Returns:
            AuthResult; the session is populated only on success
        """
        try:
            try:
                identity = await self.gateway.authenticate(email, password)
            except GatewayError as e:
                return AuthResult(error=e.message)

            try:
                record = await self.store.get_user_record(identity.id)
            except Exception as e:
                logger.error(f"User record read failed for {identity.id}: {e}")
                record = None

            if record is None:
                logger.error(f"Identity {identity.id} has no user record")
                return AuthResult(error=USER_RECORD_MISSING)

            if record.status != UserStatus.APPROVED:
                logger.info(f"Sign-in refused for {email}: status {record.status.value}")
                await best_effort("invalidate_session", self.gateway.invalidate_session())
                self._clear()
                return AuthResult(error=NOT_APPROVED)

            self._authenticate(SessionUser(
                id=identity.id,
                email=identity.email,
                username=record.username,
                status=record.status,
                created_at=identity.created_at or record.created_at,
            ), identity.session_token)
            return AuthResult()
        except Exception as e:
            logger.error(f"Sign in error: {e}")
            return AuthResult(error=SIGN_IN_ERROR)

    async def sign_out(self) -> None:
        """Sign out of the provider and always clear the local session."""
        await best_effort("invalidate_session", self.gateway.invalidate_session())
        self._clear()

    async def change_password(self, new_password: str) -> AuthResult:
        """Rotate the current identity's password.

        Strength is not re-checked here; that is the caller's job.
        """
        try:
            await self.gateway.update_credential(new_password)
        except GatewayError as e:
            return AuthResult(error=e.message)
        except Exception as e:
            logger.error(f"Change password error: {e}")
            return AuthResult(error=CHANGE_PASSWORD_FAILED)
        return AuthResult()
