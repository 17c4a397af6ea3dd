"""Network origin resolution for the registration throttle key.

Resolvers never raise: an origin that cannot be determined becomes the
fallback placeholder, and throttling proceeds with it.
"""

import logging
from abc import ABC, abstractmethod

import httpx

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_ORIGIN = "127.0.0.1"

# Default timeout for HTTP requests
DEFAULT_TIMEOUT = 5.0


class OriginResolver(ABC):
    """Base class for network origin resolvers."""

    def __init__(self, fallback: str = DEFAULT_FALLBACK_ORIGIN) -> None:
        self.fallback = fallback

    @abstractmethod
    async def resolve(self) -> str:
        """Return the caller's network origin, or the fallback."""
        ...


class StaticOriginResolver(OriginResolver):
    """Origin known up front, e.g. the HTTP peer address seen by the server."""

    def __init__(
        self,
        origin: str | None = None,
        fallback: str = DEFAULT_FALLBACK_ORIGIN,
    ) -> None:
        super().__init__(fallback)
        self.origin = origin

    async def resolve(self) -> str:
        return self.origin or self.fallback


class LookupOriginResolver(OriginResolver):
    """Ask an IP-echo service for the public address of this process."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        fallback: str = DEFAULT_FALLBACK_ORIGIN,
    ) -> None:
        super().__init__(fallback)
        self.url = url
        self.timeout = timeout

    async def resolve(self) -> str:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url)
            if response.status_code != 200:
                logger.warning(
                    f"Origin lookup returned {response.status_code}, using fallback"
                )
                return self.fallback
            return response.json().get("ip") or self.fallback
        except Exception as e:
            logger.warning(f"Origin lookup failed ({e}), using fallback")
            return self.fallback
