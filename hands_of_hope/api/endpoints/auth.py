"""Authentication endpoints."""

from fastapi import APIRouter, Depends, status

from hands_of_hope.dependencies import DatabaseSession, EmailServiceDep, rate_limited
from hands_of_hope.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
)
from hands_of_hope.schemas.base import SuccessResponse
from hands_of_hope.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Admin login",
    dependencies=[Depends(rate_limited("login"))],
)
async def login(
    request: LoginRequest,
    db: DatabaseSession,
) -> LoginResponse:
    """
    Log in with username and password.

    Returns the admin's username and role, plus a bearer token for the
    admin endpoints.
    """
    auth_service = AuthService()
    identity = await auth_service.login(db, request.username, request.password)

    return LoginResponse(
        username=identity["username"],
        role=identity["role"],
        access_token=auth_service.create_token(identity),
    )


@router.post(
    "/forgot-password",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Email a password reset code",
    dependencies=[Depends(rate_limited("forgot_password"))],
)
async def forgot_password(
    request: ForgotPasswordRequest,
    db: DatabaseSession,
    email_service: EmailServiceDep,
) -> SuccessResponse:
    """Send a 6-digit reset code to the admin matching the username or email."""
    await AuthService(email_service).request_password_reset(db, request.identifier)
    return SuccessResponse()


@router.post(
    "/reset-password",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Set a new password with a reset code",
    dependencies=[Depends(rate_limited("reset_password"))],
)
async def reset_password(
    request: ResetPasswordRequest,
    db: DatabaseSession,
) -> SuccessResponse:
    """Consume a reset code and replace the password."""
    await AuthService().reset_password(db, request.code, request.new_password)
    return SuccessResponse()
