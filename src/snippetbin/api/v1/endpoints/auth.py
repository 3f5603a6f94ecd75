# src/snippetbin/api/v1/endpoints/auth.py
"""Authentication endpoints for the SnippetBin API."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, status

from snippetbin.api.v1.dependencies import AuthServiceDep, SessionFactoryDep
from snippetbin.core.settings import settings
from snippetbin.schemas.user import (
    AuthResponse,
    LoginRequest,
    SecondFactorRequest,
    SecondFactorResponse,
    SignupRequest,
    UserOut,
)
from snippetbin.services.backup import backup_users_quietly

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    auth: AuthServiceDep,
    session_factory: SessionFactoryDep,
    background_tasks: BackgroundTasks,
) -> AuthResponse:
    """Register a new account with the ``user`` role.

    A user snapshot is written after the response is sent.
    """
    user = auth.register(payload.username, payload.password)
    if settings.backup_enabled:
        background_tasks.add_task(backup_users_quietly, session_factory)
    return AuthResponse(
        message="User created successfully",
        user=UserOut(id=user.id, username=user.username, role=user.role),
    )


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, auth: AuthServiceDep) -> AuthResponse:
    """Check credentials and return the account identity.

    Accounts with a second factor must also send ``code``; without it the
    response is 401 with ``second_factor_required`` set.
    """
    user = auth.authenticate(payload.username, payload.password, payload.code)
    return AuthResponse(
        message="Login successful",
        user=UserOut(id=user.id, username=user.username, role=user.role),
    )


@router.post("/2fa/enable", response_model=SecondFactorResponse)
def enable_second_factor(payload: SecondFactorRequest, auth: AuthServiceDep) -> SecondFactorResponse:
    """Turn on TOTP for an account and return the enrolment secret."""
    secret, uri = auth.enable_second_factor(payload.username, payload.password)
    return SecondFactorResponse(secret=secret, provisioning_uri=uri)
