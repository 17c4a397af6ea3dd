"""Tests for the end-to-end registration flow."""

from unittest.mock import AsyncMock

import pytest

from shelf_access.exceptions import GatewayError, StoreError
from shelf_access.manager.audit import SecurityAuditor
from shelf_access.manager.registration import (
    INVALID_EMAIL,
    INVALID_USERNAME,
    MISSING_FIELDS,
    PASSWORD_MISMATCH,
    WEAK_PASSWORD,
    RegistrationService,
    validate_registration,
)
from shelf_access.manager.session import (
    RECORD_CREATE_FAILED,
    REGISTRATION_ERROR,
    SessionOrchestrator,
)
from shelf_access.manager.throttle import RegistrationThrottle
from shelf_access.models.security import LimitDecision
from shelf_access.models.user import UserStatus
from shelf_access.services.origin import StaticOriginResolver


@pytest.fixture
def service(mock_gateway, mock_store) -> RegistrationService:
    resolver = StaticOriginResolver("10.0.0.1")
    return RegistrationService(
        SessionOrchestrator(mock_gateway, mock_store),
        RegistrationThrottle(mock_store, resolver),
        SecurityAuditor(mock_store, resolver),
    )


# ---------------------------------------------------------------------------
# TestValidateRegistration
# ---------------------------------------------------------------------------

class TestValidateRegistration:
    """Tests for the local registration form checks."""

    def test_valid_form(self):
        assert validate_registration("a@x.com", "user_1", "Abcdef1", "Abcdef1") is None

    def test_confirmation_optional(self):
        assert validate_registration("a@x.com", "user_1", "Abcdef1") is None

    def test_missing_fields(self):
        result = validate_registration("", "user_1", "Abcdef1")
        assert result.error == MISSING_FIELDS
        assert result.invalid

    def test_empty_confirmation_is_missing(self):
        result = validate_registration("a@x.com", "user_1", "Abcdef1", "")
        assert result.error == MISSING_FIELDS

    def test_bad_email(self):
        result = validate_registration("not-an-email", "user_1", "Abcdef1")
        assert result.error == INVALID_EMAIL
        assert result.email_valid is False

    def test_bad_username_lists_issues(self):
        result = validate_registration("a@x.com", "12345", "Abcdef1")
        assert result.error == INVALID_USERNAME
        assert result.username_issues == ["Username cannot consist only of digits"]

    def test_weak_password_lists_issues(self):
        result = validate_registration("a@x.com", "user_1", "abc")
        assert result.error == WEAK_PASSWORD
        assert len(result.password_issues) == 3

    def test_mismatched_confirmation(self):
        result = validate_registration("a@x.com", "user_1", "Abcdef1", "Abcdef2")
        assert result.error == PASSWORD_MISMATCH


# ---------------------------------------------------------------------------
# TestRegister
# ---------------------------------------------------------------------------

class TestRegister:
    """Tests for RegistrationService.register."""

    @pytest.mark.asyncio
    async def test_successful_registration(self, service, mock_gateway, mock_store):
        result = await service.register("a@x.com", "user_1", "Abcdef1", "Abcdef1")

        assert result.ok
        mock_gateway.create_identity.assert_awaited_once()

        record = mock_store.upsert_user_record.call_args.args[0]
        assert record.status == UserStatus.PENDING

        mock_store.record_registration_attempt.assert_awaited_once_with(
            "10.0.0.1", "a@x.com", True
        )

        entry = mock_store.append_security_log.call_args.args[0]
        assert entry.action == "registration_success"
        assert entry.success is True
        assert entry.details == {"email": "a@x.com", "username": "user_1"}

    @pytest.mark.asyncio
    async def test_invalid_form_makes_no_network_call(self, service, mock_gateway, mock_store):
        result = await service.register("a@x.com", "user_1", "abc")

        assert result.invalid
        mock_store.check_registration_limit.assert_not_awaited()
        mock_gateway.create_identity.assert_not_awaited()
        mock_store.record_registration_attempt.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_throttled(self, service, mock_gateway, mock_store):
        mock_store.check_registration_limit = AsyncMock(
            return_value=LimitDecision(allowed=False, reason="Too many registrations")
        )

        result = await service.register("a@x.com", "user_1", "Abcdef1")

        assert result.throttled
        assert result.error == "Too many registrations"
        mock_gateway.create_identity.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_throttle_check_error_fails_open(self, service, mock_gateway, mock_store):
        mock_store.check_registration_limit = AsyncMock(
            side_effect=StoreError("check_registration_limit", "unreachable")
        )

        result = await service.register("a@x.com", "user_1", "Abcdef1")

        assert result.ok
        mock_gateway.create_identity.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_provider_failure_recorded(self, service, mock_gateway, mock_store):
        mock_gateway.create_identity = AsyncMock(
            side_effect=GatewayError("create_identity", "User already registered")
        )

        result = await service.register("a@x.com", "user_1", "Abcdef1")

        assert result.error == "User already registered"
        mock_store.record_registration_attempt.assert_awaited_once_with(
            "10.0.0.1", "a@x.com", False
        )
        entry = mock_store.append_security_log.call_args.args[0]
        assert entry.action == "registration_failed"
        assert entry.success is False
        assert entry.details["reason"] == "User already registered"

    @pytest.mark.asyncio
    async def test_record_inconsistency_surfaced(self, service, mock_store):
        mock_store.upsert_user_record = AsyncMock(
            side_effect=StoreError("upsert_user_record", "duplicate key")
        )

        result = await service.register("a@x.com", "user_1", "Abcdef1")

        assert result.error == RECORD_CREATE_FAILED
        mock_store.record_registration_attempt.assert_awaited_once_with(
            "10.0.0.1", "a@x.com", False
        )

    @pytest.mark.asyncio
    async def test_side_effect_failures_do_not_block(self, service, mock_store):
        mock_store.record_registration_attempt = AsyncMock(side_effect=StoreError("rpc", "down"))
        mock_store.append_security_log = AsyncMock(side_effect=StoreError("insert", "down"))

        result = await service.register("a@x.com", "user_1", "Abcdef1")

        assert result.ok

    @pytest.mark.asyncio
    async def test_unexpected_error_recorded_as_system_error(self, mock_store):
        orchestrator = AsyncMock()
        orchestrator.sign_up = AsyncMock(side_effect=RuntimeError("boom"))
        service = RegistrationService(
            orchestrator,
            RegistrationThrottle(mock_store),
            SecurityAuditor(mock_store),
        )

        result = await service.register("a@x.com", "user_1", "Abcdef1")

        assert result.error == REGISTRATION_ERROR
        entry = mock_store.append_security_log.call_args.args[0]
        assert entry.details == {"email": "a@x.com", "reason": "system_error"}
        mock_store.record_registration_attempt.assert_awaited_once_with(
            "127.0.0.1", "a@x.com", False
        )

    @pytest.mark.asyncio
    async def test_explicit_origin_and_user_agent(self, service, mock_store):
        await service.register(
            "a@x.com", "user_1", "Abcdef1",
            origin="198.51.100.4",
            user_agent="Mozilla/5.0",
        )

        mock_store.check_registration_limit.assert_awaited_once_with("198.51.100.4", "a@x.com")
        entry = mock_store.append_security_log.call_args.args[0]
        assert entry.ip_address == "198.51.100.4"
        assert entry.user_agent == "Mozilla/5.0"
