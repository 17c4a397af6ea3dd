"""Dependency providers and session guards for the HTTP surface.

This is the composition root: settings are read here and injected into
the orchestrator components, which never read configuration themselves.
"""

import logging
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from supabase import Client

from shelf_access.config import get_settings
from shelf_access.db.client import DatabaseClient, create_supabase_client
from shelf_access.db.gateway import SupabaseCredentialGateway
from shelf_access.manager.approval import ApprovalWorkflow
from shelf_access.manager.audit import SecurityAuditor
from shelf_access.manager.registration import RegistrationService
from shelf_access.manager.session import SessionOrchestrator
from shelf_access.manager.throttle import RegistrationThrottle
from shelf_access.models.session import Session
from shelf_access.services.origin import (
    LookupOriginResolver,
    OriginResolver,
    StaticOriginResolver,
)

logger = logging.getLogger(__name__)

# One process, one current user: components are shared singletons
_supabase: Client | None = None
_db_client: DatabaseClient | None = None
_gateway: SupabaseCredentialGateway | None = None
_orchestrator: SessionOrchestrator | None = None
_approval: ApprovalWorkflow | None = None
_throttle: RegistrationThrottle | None = None
_auditor: SecurityAuditor | None = None
_registration: RegistrationService | None = None


def get_supabase_client() -> Client:
    """Get or create the shared Supabase client."""
    global _supabase
    if _supabase is None:
        _supabase = create_supabase_client()
    return _supabase


def get_db_client() -> DatabaseClient:
    """Get or create database client instance."""
    global _db_client
    if _db_client is None:
        _db_client = DatabaseClient(get_supabase_client())
    return _db_client


def get_gateway() -> SupabaseCredentialGateway:
    """Get or create credential gateway instance."""
    global _gateway
    if _gateway is None:
        _gateway = SupabaseCredentialGateway(get_supabase_client())
    return _gateway


def build_origin_resolver() -> OriginResolver:
    """Create the origin resolver selected by settings."""
    settings = get_settings()
    if settings.origin_lookup_enabled:
        return LookupOriginResolver(
            settings.origin_lookup_url,
            timeout=settings.origin_lookup_timeout,
            fallback=settings.origin_fallback,
        )
    return StaticOriginResolver(fallback=settings.origin_fallback)


def get_orchestrator() -> SessionOrchestrator:
    """Get or create the session orchestrator."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = SessionOrchestrator(
            get_gateway(),
            get_db_client(),
            admin_email=get_settings().admin_email,
        )
    return _orchestrator


def get_approval_workflow() -> ApprovalWorkflow:
    """Get or create the approval workflow."""
    global _approval
    if _approval is None:
        _approval = ApprovalWorkflow(get_gateway(), get_db_client())
    return _approval


def get_throttle() -> RegistrationThrottle:
    """Get or create the registration throttle."""
    global _throttle
    if _throttle is None:
        _throttle = RegistrationThrottle(get_db_client(), build_origin_resolver())
    return _throttle


def get_auditor() -> SecurityAuditor:
    """Get or create the security auditor."""
    global _auditor
    if _auditor is None:
        _auditor = SecurityAuditor(get_db_client(), build_origin_resolver())
    return _auditor


def get_registration_service() -> RegistrationService:
    """Get or create the registration service."""
    global _registration
    if _registration is None:
        _registration = RegistrationService(
            get_orchestrator(),
            get_throttle(),
            get_auditor(),
        )
    return _registration


def get_request_origin(request: Request) -> str | None:
    """Network origin of the HTTP peer, derived server-side.

    Returns None when origin lookup is enabled so the configured resolver
    decides instead.
    """
    if get_settings().origin_lookup_enabled:
        return None
    return request.client.host if request.client else None


def get_user_agent(request: Request) -> str | None:
    """Client signature of the HTTP peer."""
    return request.headers.get("user-agent")


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_session(
    orchestrator: Annotated[SessionOrchestrator, Depends(get_orchestrator)],
    authorization: Annotated[str | None, Header()] = None,
) -> Session:
    """Return the current session if the caller holds its bearer token.

    Args:
        orchestrator: The process session orchestrator
        authorization: The Authorization header

    Raises:
        HTTPException: 401 if nobody is signed in or the token does not match
    """
    session = orchestrator.session
    if session is None or not orchestrator.holds_token(bearer_token(authorization)):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
        )
    return session


async def require_admin(
    session: Annotated[Session, Depends(require_session)],
) -> Session:
    """Return the current session if it belongs to the administrator.

    Raises:
        HTTPException: 403 for non-admin sessions
    """
    if not session.is_admin:
        logger.warning(f"Admin access attempted by {session.user.email}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required",
        )
    return session


# Type aliases for dependency injection
CurrentSession = Annotated[Session, Depends(require_session)]
AdminSession = Annotated[Session, Depends(require_admin)]
Origin = Annotated[str | None, Depends(get_request_origin)]
UserAgent = Annotated[str | None, Depends(get_user_agent)]
