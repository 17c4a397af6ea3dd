"""FastAPI routes for registration, sign-in and user approval."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from shelf_access import __version__
from shelf_access.api.auth import (
    AdminSession,
    CurrentSession,
    Origin,
    UserAgent,
    get_approval_workflow,
    get_auditor,
    get_db_client,
    get_orchestrator,
    get_registration_service,
)
from shelf_access.db.client import DatabaseClient
from shelf_access.manager.approval import ACTION_IN_PROGRESS, ApprovalWorkflow
from shelf_access.manager.audit import SecurityAuditor
from shelf_access.manager.registration import RegistrationService
from shelf_access.manager.session import (
    NOT_APPROVED,
    USER_RECORD_MISSING,
    SessionOrchestrator,
)
from shelf_access.models.requests import (
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
)
from shelf_access.models.results import ApprovalOutcome, RegistrationResult
from shelf_access.models.session import LoginResponse, Session
from shelf_access.models.user import UserListing
from shelf_access.security.validators import validate_password_change

logger = logging.getLogger(__name__)

router = APIRouter()

REGISTERED_MESSAGE = "Registration successful, please wait for administrator approval"
NO_SESSION_TOKEN = "Credential provider issued no session token"


@router.get("/health")
async def health(
    db: Annotated[DatabaseClient, Depends(get_db_client)],
) -> dict:
    """Health check endpoint."""
    database = await db.health_check()
    return {
        "status": "ok" if database["healthy"] else "degraded",
        "version": __version__,
        "database": database,
    }


# -------------------------------------------------------------------------
# Account endpoints
# -------------------------------------------------------------------------

@router.post("/auth/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    registration: Annotated[RegistrationService, Depends(get_registration_service)],
    origin: Origin,
    user_agent: UserAgent,
) -> dict:
    """Register a new account; it stays pending until an admin approves it.

    Returns:
        Confirmation message

    Raises:
        HTTPException: 422 on validation issues, 429 when throttled,
            400 when the provider or store refuses the registration
    """
    result: RegistrationResult = await registration.register(
        request.email,
        request.username,
        request.password,
        confirm_password=request.confirm_password,
        origin=origin,
        user_agent=user_agent,
    )

    if result.invalid:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=result.model_dump(),
        )
    if result.throttled:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=result.error,
        )
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)

    return {"message": REGISTERED_MESSAGE}


@router.post("/auth/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    orchestrator: Annotated[SessionOrchestrator, Depends(get_orchestrator)],
    auditor: Annotated[SecurityAuditor, Depends(get_auditor)],
    origin: Origin,
    user_agent: UserAgent,
) -> LoginResponse:
    """Sign in. Only approved accounts get a session.

    Returns:
        The session and the bearer token later requests must present

    Raises:
        HTTPException: 403 if the account is not approved, 409 if the user
            record is missing, 401 for any other failure
    """
    result = await orchestrator.sign_in(request.email, request.password)

    details = {"email": request.email}
    if not result.ok:
        details["reason"] = result.error
    await auditor.log_event(
        "login_success" if result.ok else "login_failed",
        details,
        result.ok,
        origin=origin,
        user_agent=user_agent,
    )

    if not result.ok or orchestrator.session is None:
        if result.error == NOT_APPROVED:
            code = status.HTTP_403_FORBIDDEN
        elif result.error == USER_RECORD_MISSING:
            code = status.HTTP_409_CONFLICT
        else:
            code = status.HTTP_401_UNAUTHORIZED
        raise HTTPException(status_code=code, detail=result.error)

    token = orchestrator.session_token
    if not token:
        logger.error(f"Sign-in for {request.email} returned no session token")
        await orchestrator.sign_out()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=NO_SESSION_TOKEN)

    return LoginResponse(session=orchestrator.session, access_token=token)


@router.post("/auth/logout")
async def logout(
    session: CurrentSession,
    orchestrator: Annotated[SessionOrchestrator, Depends(get_orchestrator)],
) -> dict:
    """Sign out the current session. Always succeeds locally."""
    await orchestrator.sign_out()
    logger.info(f"Signed out {session.user.email}")
    return {"status": "signed_out"}


@router.get("/auth/me", response_model=Session)
async def me(session: CurrentSession) -> Session:
    """Return the current session."""
    return session


@router.post("/auth/password")
async def change_password(
    request: PasswordChangeRequest,
    session: CurrentSession,
    orchestrator: Annotated[SessionOrchestrator, Depends(get_orchestrator)],
) -> dict:
    """Change the signed-in user's password.

    Raises:
        HTTPException: 422 on form issues, 400 if the provider refuses
    """
    issues = validate_password_change(
        request.current_password,
        request.new_password,
        request.confirm_password,
    )
    if issues:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=issues,
        )

    result = await orchestrator.change_password(request.new_password)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)

    logger.info(f"Password changed for {session.user.email}")
    return {"status": "password_changed"}


# -------------------------------------------------------------------------
# Admin endpoints
# -------------------------------------------------------------------------

@router.get("/admin/users", response_model=UserListing)
async def list_users(
    session: AdminSession,
    workflow: Annotated[ApprovalWorkflow, Depends(get_approval_workflow)],
) -> UserListing:
    """List all users newest first, with per-status counts.

    Raises:
        HTTPException: 502 if the store cannot be read
    """
    listing = await workflow.list_users()
    if listing.error:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=listing.error)
    return listing


async def _apply(
    outcome: ApprovalOutcome,
    session: Session,
    auditor: SecurityAuditor,
    origin: str | None,
    user_agent: str | None,
) -> ApprovalOutcome:
    """Audit an admin transition and map its failure to an HTTP error."""
    await auditor.log_event(
        f"user_{outcome.status.value}",
        {
            "user_id": outcome.user_id,
            "admin": session.user.email,
            "credential_confirmed": outcome.credential_confirmed,
            "error": outcome.error,
        },
        outcome.ok,
        origin=origin,
        user_agent=user_agent,
    )

    if outcome.error == ACTION_IN_PROGRESS:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=outcome.error)
    if not outcome.ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=outcome.error)
    return outcome


@router.post("/admin/users/{user_id}/approve", response_model=ApprovalOutcome)
async def approve_user(
    user_id: str,
    session: AdminSession,
    workflow: Annotated[ApprovalWorkflow, Depends(get_approval_workflow)],
    auditor: Annotated[SecurityAuditor, Depends(get_auditor)],
    origin: Origin,
    user_agent: UserAgent,
) -> ApprovalOutcome:
    """Approve a user and confirm their credential (best-effort)."""
    outcome = await workflow.approve(user_id)
    return await _apply(outcome, session, auditor, origin, user_agent)


@router.post("/admin/users/{user_id}/reject", response_model=ApprovalOutcome)
async def reject_user(
    user_id: str,
    session: AdminSession,
    workflow: Annotated[ApprovalWorkflow, Depends(get_approval_workflow)],
    auditor: Annotated[SecurityAuditor, Depends(get_auditor)],
    origin: Origin,
    user_agent: UserAgent,
) -> ApprovalOutcome:
    """Reject a user."""
    outcome = await workflow.reject(user_id)
    return await _apply(outcome, session, auditor, origin, user_agent)
