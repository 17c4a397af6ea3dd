"""Supabase database client for user records, security logs and throttling."""

import logging
from datetime import UTC, datetime
from typing import Any

from supabase import create_client, Client

from shelf_access.config import get_settings
from shelf_access.exceptions import StoreError
from shelf_access.models.security import LimitDecision, SecurityLogEntry
from shelf_access.models.user import UserRecord, UserStatus

logger = logging.getLogger(__name__)

USERS_TABLE = "users"
SECURITY_LOGS_TABLE = "security_logs"


def create_supabase_client() -> Client:
    """Create a Supabase client from settings.

    Raises:
        pydantic.ValidationError: If SUPABASE_URL or SUPABASE_KEY is missing
    """
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_key)


class DatabaseClient:
    """Client for Supabase database operations.

    Implements the DirectoryStore protocol. Every failure surfaces as
    StoreError; nothing is retried here.
    """

    def __init__(self, client: Client | None = None) -> None:
        self.client: Client = client if client is not None else create_supabase_client()

    def _execute(self, operation: str, query: Any) -> Any:
        """Run a built query, converting any failure to StoreError."""
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"Store operation {operation} failed: {e}")
            raise StoreError(operation, str(e)) from e

    # -------------------------------------------------------------------------
    # User records
    # -------------------------------------------------------------------------

    async def upsert_user_record(self, record: UserRecord) -> None:
        """Insert or replace a user record.

        Conflicts on id, so a double submission lands on the same row.

        Args:
            record: The user record to write
        """
        query = self.client.table(USERS_TABLE).upsert(
            [record.model_dump(mode="json")],
            on_conflict="id",
        )
        self._execute("upsert_user_record", query)
        logger.debug(f"Upserted user record {record.id} ({record.status.value})")

    async def get_user_record(self, user_id: str) -> UserRecord | None:
        """Get a user record by ID.

        Args:
            user_id: The identity ID

        Returns:
            UserRecord if found, None otherwise
        """
        query = (
            self.client.table(USERS_TABLE)
            .select("*")
            .eq("id", user_id)
        )
        result = self._execute("get_user_record", query)

        if result.data:
            return UserRecord(**result.data[0])
        return None

    async def update_user_status(self, user_id: str, status: UserStatus) -> None:
        """Update the approval status of a user.

        Args:
            user_id: The identity ID
            status: New status
        """
        query = (
            self.client.table(USERS_TABLE)
            .update({
                "status": status.value,
                "updated_at": datetime.now(UTC).isoformat(),
            })
            .eq("id", user_id)
        )
        self._execute("update_user_status", query)
        logger.debug(f"Updated user {user_id} status to {status.value}")

    async def list_user_records(self) -> list[UserRecord]:
        """List all user records, newest first.

        Returns:
            List of user records
        """
        query = (
            self.client.table(USERS_TABLE)
            .select("*")
            .order("created_at", desc=True)
        )
        result = self._execute("list_user_records", query)
        return [UserRecord(**row) for row in result.data]

    # -------------------------------------------------------------------------
    # Registration rate limiting
    # -------------------------------------------------------------------------

    async def check_registration_limit(
        self,
        origin: str,
        email: str,
    ) -> LimitDecision:
        """Ask the rate-limit procedure whether a registration may proceed.

        Args:
            origin: Network origin of the caller
            email: Email being registered

        Returns:
            LimitDecision; an empty answer is treated as a refusal
        """
        query = self.client.rpc("check_registration_limit", {
            "p_ip_address": origin,
            "p_email": email,
        })
        result = self._execute("check_registration_limit", query)

        row: dict[str, Any] = result.data[0] if result.data else {}
        return LimitDecision(
            allowed=bool(row.get("is_allowed", False)),
            reason=row.get("reason") or "Unknown reason",
        )

    async def record_registration_attempt(
        self,
        origin: str,
        email: str,
        success: bool,
    ) -> None:
        """Record a registration outcome in the rolling counters.

        Args:
            origin: Network origin of the caller
            email: Email that was registered
            success: Whether the registration succeeded
        """
        query = self.client.rpc("record_registration_attempt", {
            "p_ip_address": origin,
            "p_email": email,
            "p_success": success,
        })
        self._execute("record_registration_attempt", query)

    # -------------------------------------------------------------------------
    # Security log
    # -------------------------------------------------------------------------

    async def append_security_log(self, entry: SecurityLogEntry) -> None:
        """Append a security event.

        Args:
            entry: The event to write
        """
        query = self.client.table(SECURITY_LOGS_TABLE).insert([entry.model_dump()])
        self._execute("append_security_log", query)

    # -------------------------------------------------------------------------
    # Health Check
    # -------------------------------------------------------------------------

    async def health_check(self) -> dict[str, Any]:
        """Run a one-row query against the users table. Never raises.

        Returns:
            Dict with `healthy` and, when unhealthy, the store `error`
        """
        try:
            self.client.table(USERS_TABLE).select("id").limit(1).execute()
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {"healthy": False, "error": str(e)}
        return {"healthy": True, "error": None}
