"""Best-effort side effects.

Security log writes, attempt recording, credential confirmation and
provider sign-out run through here: a failure is logged and reported as
False, never raised, and never undoes the primary operation.
"""

import logging
from typing import Any, Awaitable

logger = logging.getLogger(__name__)


async def best_effort(operation: str, call: Awaitable[Any]) -> bool:
    """Await a side effect whose failure must not propagate.

    Args:
        operation: Name used in the log line
        call: The awaitable performing the side effect

    Returns:
        True if the side effect completed, False if it failed
    """
    try:
        await call
        return True
    except Exception as e:
        logger.error(f"Best-effort {operation} failed: {e}")
        return False
