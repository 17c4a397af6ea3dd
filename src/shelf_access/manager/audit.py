"""Write-only security event log."""

import logging
from typing import Any

from shelf_access.db.protocols import DirectoryStore
from shelf_access.manager.best_effort import best_effort
from shelf_access.manager.throttle import resolve_origin
from shelf_access.models.security import SecurityLogEntry
from shelf_access.services.origin import OriginResolver, StaticOriginResolver

logger = logging.getLogger(__name__)

UNKNOWN_USER_AGENT = "Unknown"


class SecurityAuditor:
    """Appends security events to the store, best-effort."""

    def __init__(
        self,
        store: DirectoryStore,
        resolver: OriginResolver | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver or StaticOriginResolver()

    async def log_event(
        self,
        action: str,
        details: dict[str, Any],
        success: bool,
        origin: str | None = None,
        user_agent: str | None = None,
    ) -> bool:
        """Append a security event.

        Args:
            action: Event name, e.g. ``registration_success``
            details: Structured event details
            success: Whether the audited action succeeded
            origin: Caller origin if already known (resolved otherwise)
            user_agent: Client signature

        Returns:
            True if the entry was written
        """
        entry = SecurityLogEntry(
            ip_address=await resolve_origin(self.resolver, origin),
            user_agent=user_agent or UNKNOWN_USER_AGENT,
            action=action,
            details=details,
            success=success,
        )
        logger.debug(f"Security event {action} (success={success})")
        return await best_effort("append_security_log", self.store.append_security_log(entry))
