"""Registration throttle.

Keys on the (network origin, email) pair: one abusive origin is contained
across many addresses, while a legitimate user behind a shared origin is
only held back for the window the store enforces.
"""

import logging

from shelf_access.db.protocols import DirectoryStore
from shelf_access.manager.best_effort import best_effort
from shelf_access.models.security import LimitDecision
from shelf_access.services.origin import (
    DEFAULT_FALLBACK_ORIGIN,
    OriginResolver,
    StaticOriginResolver,
)

logger = logging.getLogger(__name__)

FAIL_OPEN_REASON = "Limit check failed, allowing registration"


async def resolve_origin(resolver: OriginResolver, origin: str | None = None) -> str:
    """Pick the throttle origin: explicit value, resolver, then placeholder."""
    if origin:
        return origin
    try:
        return await resolver.resolve()
    except Exception as e:
        logger.warning(f"Origin resolution failed ({e}), using placeholder")
        return resolver.fallback or DEFAULT_FALLBACK_ORIGIN


class RegistrationThrottle:
    """Gates registration attempts through the store's rate-limit procedures.

    The store owns the counters; this class never mutates them except by
    reporting outcomes, and never retries on failure.
    """

    def __init__(
        self,
        store: DirectoryStore,
        resolver: OriginResolver | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver or StaticOriginResolver()

    async def check_registration_limits(
        self,
        email: str,
        origin: str | None = None,
    ) -> LimitDecision:
        """Check whether a registration from (origin, email) may proceed.

        Fails open: if the check itself errors the attempt is allowed, since
        availability beats throttling while the store is degraded.

        Args:
            email: Email being registered
            origin: Caller origin if already known (resolved otherwise)

        Returns:
            LimitDecision from the store, or an allowing decision on error
        """
        ip = await resolve_origin(self.resolver, origin)
        try:
            decision = await self.store.check_registration_limit(ip, email)
        except Exception as e:
            logger.error(f"Registration limit check failed for {ip}: {e}")
            return LimitDecision(allowed=True, reason=FAIL_OPEN_REASON)

        if not decision.allowed:
            logger.info(f"Registration throttled for {ip}: {decision.reason}")
        return decision

    async def record_registration_attempt(
        self,
        email: str,
        success: bool,
        origin: str | None = None,
    ) -> None:
        """Report a registration outcome so the rolling counters stay accurate.

        Called after every attempt, successful or not. A recording failure
        is logged and never reaches the caller.
        """
        ip = await resolve_origin(self.resolver, origin)
        await best_effort(
            "record_registration_attempt",
            self.store.record_registration_attempt(ip, email, success),
        )
