"""Identity models returned by the credential provider."""

from datetime import datetime

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """Account identity owned by the credential provider.

    The password never lives here; only what the provider hands back.
    """

    id: str
    email: str
    session_token: str | None = None
    created_at: datetime | None = None
    metadata: dict = Field(default_factory=dict)
