"""Supabase Auth adapter for identities and credentials."""

import logging
from typing import Any

from supabase import Client

from shelf_access.db.client import create_supabase_client
from shelf_access.exceptions import GatewayError
from shelf_access.models.identity import Identity

logger = logging.getLogger(__name__)


def _error_message(error: Exception) -> str:
    """Extract the provider's human-readable message from an error."""
    message = getattr(error, "message", None)
    return message if isinstance(message, str) and message else str(error)


def _to_identity(user: Any, session: Any = None, fallback_email: str = "") -> Identity:
    """Build an Identity from a Supabase user (and optional session)."""
    return Identity(
        id=str(user.id),
        email=user.email or fallback_email,
        session_token=session.access_token if session is not None else None,
        created_at=getattr(user, "created_at", None),
        metadata=user.user_metadata or {},
    )


class SupabaseCredentialGateway:
    """Credential provider backed by Supabase Auth.

    Implements the CredentialGateway protocol. Hashing, token issuance and
    session persistence all stay on the Supabase side.
    """

    def __init__(self, client: Client | None = None) -> None:
        self.client: Client = client if client is not None else create_supabase_client()

    async def authenticate(self, email: str, password: str) -> Identity:
        """Sign in with email and password.

        Raises:
            GatewayError: If the credentials are rejected or no user comes back
        """
        try:
            response = self.client.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as e:
            raise GatewayError("authenticate", _error_message(e)) from e

        if response.user is None:
            raise GatewayError("authenticate", "Sign-in failed")

        return _to_identity(response.user, response.session, fallback_email=email)

    async def create_identity(
        self,
        email: str,
        password: str,
        metadata: dict,
    ) -> Identity | None:
        """Register a new identity.

        Args:
            email: Account email
            password: Account password
            metadata: User metadata stored alongside the identity

        Returns:
            The created Identity, or None if the provider returned no user
        """
        try:
            response = self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": metadata},
            })
        except Exception as e:
            raise GatewayError("create_identity", _error_message(e)) from e

        if response.user is None:
            return None
        return _to_identity(response.user, response.session, fallback_email=email)

    async def get_current_session(self) -> Identity | None:
        """Return the identity of the live session, if any."""
        try:
            session = self.client.auth.get_session()
        except Exception as e:
            raise GatewayError("get_current_session", _error_message(e)) from e

        if session is None or session.user is None:
            return None
        return _to_identity(session.user, session)

    async def invalidate_session(self) -> None:
        """Sign out of the provider session."""
        try:
            self.client.auth.sign_out()
        except Exception as e:
            raise GatewayError("invalidate_session", _error_message(e)) from e

    async def update_credential(self, new_password: str) -> None:
        """Change the password of the signed-in identity."""
        try:
            self.client.auth.update_user({"password": new_password})
        except Exception as e:
            raise GatewayError("update_credential", _error_message(e)) from e

    async def confirm_identity(self, identity_id: str) -> None:
        """Confirm an identity's email through the confirm_user_email procedure."""
        try:
            self.client.rpc("confirm_user_email", {"user_id": identity_id}).execute()
        except Exception as e:
            raise GatewayError("confirm_identity", _error_message(e)) from e
        logger.debug(f"Confirmed identity {identity_id}")
