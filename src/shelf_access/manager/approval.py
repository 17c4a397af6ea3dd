"""Administrator approval workflow."""

import logging

from shelf_access.db.protocols import CredentialGateway, DirectoryStore
from shelf_access.manager.best_effort import best_effort
from shelf_access.models.results import ApprovalOutcome
from shelf_access.models.user import UserListing, UserStats, UserStatus

logger = logging.getLogger(__name__)

ACTION_IN_PROGRESS = "Action already in progress for this user"
LIST_FAILED = "Could not load users"


class ApprovalWorkflow:
    """Moves user records from pending to approved or rejected.

    Transitions are last-writer-wins and idempotent; there is no
    compare-and-swap, the store applies each update atomically. A second
    action on a user whose first action has not settled yet is refused
    rather than sent concurrently.
    """

    def __init__(self, gateway: CredentialGateway, store: DirectoryStore) -> None:
        self.gateway = gateway
        self.store = store
        self._in_flight: set[str] = set()

    def is_busy(self, user_id: str) -> bool:
        """Whether an action on this user is still in flight."""
        return user_id in self._in_flight

    async def list_users(self) -> UserListing:
        """List users newest first with per-status counts.

        Returns:
            UserListing; on store failure it is empty and carries the error
        """
        try:
            records = await self.store.list_user_records()
        except Exception as e:
            logger.error(f"Error fetching users: {e}")
            return UserListing(error=LIST_FAILED)

        return UserListing(users=records, stats=UserStats.from_records(records))

    async def approve(self, user_id: str) -> ApprovalOutcome:
        """Approve a user, then confirm their credential.

        If confirmation fails the approval still stands and confirmation
        can be re-run; the status change is never rolled back.

        Args:
            user_id: The user record / identity ID

        Returns:
            ApprovalOutcome; credential_confirmed reports step two
        """
        return await self._transition(user_id, UserStatus.APPROVED)

    async def reject(self, user_id: str) -> ApprovalOutcome:
        """Reject a user. No credential side effect.

        Args:
            user_id: The user record / identity ID
        """
        return await self._transition(user_id, UserStatus.REJECTED)

    async def _transition(self, user_id: str, status: UserStatus) -> ApprovalOutcome:
        if self.is_busy(user_id):
            return ApprovalOutcome(user_id=user_id, status=status, error=ACTION_IN_PROGRESS)

        self._in_flight.add(user_id)
        try:
            try:
                await self.store.update_user_status(user_id, status)
            except Exception as e:
                logger.error(f"Error setting user {user_id} to {status.value}: {e}")
                return ApprovalOutcome(user_id=user_id, status=status, error=str(e))

            logger.info(f"User {user_id} set to {status.value}")

            if status != UserStatus.APPROVED:
                return ApprovalOutcome(user_id=user_id, status=status)

            confirmed = await best_effort(
                "confirm_identity",
                self.gateway.confirm_identity(user_id),
            )
            if not confirmed:
                logger.warning(f"User {user_id} approved but credential not confirmed")
            return ApprovalOutcome(
                user_id=user_id,
                status=status,
                credential_confirmed=confirmed,
            )
        finally:
            self._in_flight.discard(user_id)
