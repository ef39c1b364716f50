"""Authentication schemas."""

from pydantic import Field

from hands_of_hope.schemas.admin import AdminRole
from hands_of_hope.schemas.base import CamelModel


class LoginRequest(CamelModel):
    """Username/password login."""

    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    """Identity of the logged-in admin plus a bearer token."""

    success: bool = True
    username: str
    role: AdminRole
    access_token: str
    token_type: str = "bearer"


class ForgotPasswordRequest(CamelModel):
    """Start a password reset by username or email."""

    identifier: str = Field(..., min_length=1, description="Username or email")


class ResetPasswordRequest(CamelModel):
    """Finish a password reset with the emailed code."""

    code: str = Field(..., min_length=1, max_length=16)
    new_password: str = Field(..., min_length=8, max_length=128)
