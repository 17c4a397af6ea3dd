"""Account lifecycle orchestration."""

from shelf_access.manager.approval import ApprovalWorkflow
from shelf_access.manager.audit import SecurityAuditor
from shelf_access.manager.best_effort import best_effort
from shelf_access.manager.registration import RegistrationService, validate_registration
from shelf_access.manager.session import SessionOrchestrator, is_admin
from shelf_access.manager.throttle import RegistrationThrottle, resolve_origin

__all__ = [
    "ApprovalWorkflow",
    "best_effort",
    "is_admin",
    "RegistrationService",
    "RegistrationThrottle",
    "resolve_origin",
    "SecurityAuditor",
    "SessionOrchestrator",
    "validate_registration",
]
