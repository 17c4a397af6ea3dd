"""User record models - the durable authorization state."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class UserStatus(str, Enum):
    """Approval state of a user record.

    PENDING: Registered, waiting for an administrator
    APPROVED: May sign in
    REJECTED: Refused by an administrator
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserRecord(BaseModel):
    """Row of the ``users`` table."""

    id: str
    email: str
    username: str
    status: UserStatus = UserStatus.PENDING
    created_at: datetime
    updated_at: datetime | None = None


class UserStats(BaseModel):
    """Aggregate counts over a user listing."""

    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0

    @classmethod
    def from_records(cls, records: list[UserRecord]) -> "UserStats":
        """Partition records on status and count each bucket."""
        stats = cls(total=len(records))
        for record in records:
            if record.status == UserStatus.PENDING:
                stats.pending += 1
            elif record.status == UserStatus.APPROVED:
                stats.approved += 1
            elif record.status == UserStatus.REJECTED:
                stats.rejected += 1
        return stats


class UserListing(BaseModel):
    """Users ordered newest first, with their aggregate counts."""

    users: list[UserRecord] = Field(default_factory=list)
    stats: UserStats = Field(default_factory=UserStats)
    error: str | None = None
