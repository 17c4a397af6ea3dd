"""Full registration flow.

validate -> throttle check -> sign up -> record attempt -> security log.
Validation failures never reach the network.
"""

import logging

from shelf_access.manager.audit import SecurityAuditor
from shelf_access.manager.session import REGISTRATION_ERROR, SessionOrchestrator
from shelf_access.manager.throttle import RegistrationThrottle
from shelf_access.models.results import RegistrationResult
from shelf_access.security.validators import (
    check_password_strength,
    validate_email,
    validate_username,
)

logger = logging.getLogger(__name__)

MISSING_FIELDS = "All fields are required"
INVALID_EMAIL = "Please enter a valid email address"
INVALID_USERNAME = "Username does not meet the requirements"
WEAK_PASSWORD = "Password does not meet the strength requirements"
PASSWORD_MISMATCH = "Passwords do not match"


def validate_registration(
    email: str,
    username: str,
    password: str,
    confirm_password: str | None = None,
) -> RegistrationResult | None:
    """Run every local check on a registration form.

    Args:
        email: Account email
        username: Desired username
        password: Desired password
        confirm_password: Repeated password; skipped when not collected

    Returns:
        A failed RegistrationResult, or None if the form may be submitted
    """
    if not email or not username or not password or confirm_password == "":
        return RegistrationResult(error=MISSING_FIELDS, invalid=True)

    if not validate_email(email):
        return RegistrationResult(error=INVALID_EMAIL, email_valid=False, invalid=True)

    username_check = validate_username(username)
    if not username_check.valid:
        return RegistrationResult(
            error=INVALID_USERNAME,
            username_issues=username_check.issues,
            invalid=True,
        )

    password_check = check_password_strength(password)
    if not password_check.strong:
        return RegistrationResult(
            error=WEAK_PASSWORD,
            password_issues=password_check.issues,
            invalid=True,
        )

    if confirm_password is not None and password != confirm_password:
        return RegistrationResult(error=PASSWORD_MISMATCH, invalid=True)

    return None


class RegistrationService:
    """Drives a registration request through every gate.

    Every attempt that reaches the provider is recorded with the throttle
    and the security log, whatever its outcome.
    """

    def __init__(
        self,
        orchestrator: SessionOrchestrator,
        throttle: RegistrationThrottle,
        auditor: SecurityAuditor,
    ) -> None:
        self.orchestrator = orchestrator
        self.throttle = throttle
        self.auditor = auditor

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        confirm_password: str | None = None,
        origin: str | None = None,
        user_agent: str | None = None,
    ) -> RegistrationResult:
        """Register a new account as pending approval.

        Args:
            email: Account email
            username: Desired username
            password: Desired password
            confirm_password: Repeated password
            origin: Caller network origin, if known
            user_agent: Caller client signature

        Returns:
            RegistrationResult
        """
        invalid = validate_registration(email, username, password, confirm_password)
        if invalid is not None:
            return invalid

        limit = await self.throttle.check_registration_limits(email, origin=origin)
        if not limit.allowed:
            return RegistrationResult(error=limit.reason, throttled=True)

        try:
            result = await self.orchestrator.sign_up(email, username, password)
        except Exception as e:
            logger.error(f"Registration error for {email}: {e}")
            await self.throttle.record_registration_attempt(email, False, origin=origin)
            await self.auditor.log_event(
                "registration_failed",
                {"email": email, "reason": "system_error"},
                False,
                origin=origin,
                user_agent=user_agent,
            )
            return RegistrationResult(error=REGISTRATION_ERROR)

        await self.throttle.record_registration_attempt(email, result.ok, origin=origin)

        if not result.ok:
            await self.auditor.log_event(
                "registration_failed",
                {"email": email, "reason": result.error},
                False,
                origin=origin,
                user_agent=user_agent,
            )
            return RegistrationResult(error=result.error)

        await self.auditor.log_event(
            "registration_success",
            {"email": email, "username": username},
            True,
            origin=origin,
            user_agent=user_agent,
        )
        return RegistrationResult()
