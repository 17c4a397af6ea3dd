"""Global test configuration for Shelf Access."""

import os
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from shelf_access.models.identity import Identity
from shelf_access.models.security import LimitDecision
from shelf_access.models.user import UserRecord, UserStatus

ADMIN_EMAIL = "admin@shelf.test"


@pytest.fixture(autouse=True, scope="session")
def _set_test_env_vars():
    """Set dummy environment variables for Settings validation.

    Only sets values that aren't already present, so real env vars take
    precedence (useful for integration tests).
    """
    defaults = {
        "SUPABASE_URL": "https://test.supabase.co",
        "SUPABASE_KEY": "test-supabase-key",
        "ADMIN_EMAIL": ADMIN_EMAIL,
    }
    originals = {}
    for key, value in defaults.items():
        if key not in os.environ:
            os.environ[key] = value
            originals[key] = None
        else:
            originals[key] = os.environ[key]

    # Clear the lru_cache on get_settings so it picks up the new env vars
    from shelf_access.config import get_settings
    get_settings.cache_clear()

    yield

    # Restore original env state
    for key, original in originals.items():
        if original is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------

def make_identity(
    email: str = "reader@x.com",
    identity_id: str = "user-1",
    username: str | None = "reader_1",
) -> Identity:
    """Create an Identity as the credential provider would return it."""
    return Identity(
        id=identity_id,
        email=email,
        session_token="token-abc",
        created_at=datetime(2024, 5, 1, tzinfo=UTC),
        metadata={"username": username} if username else {},
    )


def make_record(
    status: UserStatus = UserStatus.APPROVED,
    user_id: str = "user-1",
    email: str = "reader@x.com",
    username: str = "reader_1",
    created_at: datetime | None = None,
) -> UserRecord:
    """Create a UserRecord."""
    return UserRecord(
        id=user_id,
        email=email,
        username=username,
        status=status,
        created_at=created_at or datetime(2024, 5, 1, tzinfo=UTC),
        updated_at=created_at or datetime(2024, 5, 1, tzinfo=UTC),
    )


@pytest.fixture
def mock_gateway():
    """Create a mock CredentialGateway."""
    gateway = MagicMock()
    gateway.authenticate = AsyncMock(return_value=make_identity())
    gateway.create_identity = AsyncMock(return_value=make_identity())
    gateway.get_current_session = AsyncMock(return_value=None)
    gateway.invalidate_session = AsyncMock()
    gateway.update_credential = AsyncMock()
    gateway.confirm_identity = AsyncMock()
    return gateway


@pytest.fixture
def mock_store():
    """Create a mock DirectoryStore."""
    store = MagicMock()
    store.upsert_user_record = AsyncMock()
    store.get_user_record = AsyncMock(return_value=make_record())
    store.update_user_status = AsyncMock()
    store.list_user_records = AsyncMock(return_value=[])
    store.check_registration_limit = AsyncMock(
        return_value=LimitDecision(allowed=True, reason="ok")
    )
    store.record_registration_attempt = AsyncMock()
    store.append_security_log = AsyncMock()
    return store
