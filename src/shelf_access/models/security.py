"""Registration throttle and security log models."""

from pydantic import BaseModel, Field


class LimitDecision(BaseModel):
    """Answer from the registration rate limiter."""

    allowed: bool
    reason: str


class SecurityLogEntry(BaseModel):
    """Row appended to the ``security_logs`` table."""

    ip_address: str
    user_agent: str
    action: str
    details: dict = Field(default_factory=dict)
    success: bool
