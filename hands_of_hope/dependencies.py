"""FastAPI dependencies."""

from collections.abc import Awaitable, Callable
from typing import Annotated, Any
from uuid import UUID

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from hands_of_hope.config import settings
from hands_of_hope.core.exceptions import (
    AccessDeniedException,
    RateLimitException,
    UnauthorizedException,
)
from hands_of_hope.core.redis_client import CacheManager, RateLimiter, get_redis_client
from hands_of_hope.core.security import decode_access_token
from hands_of_hope.database import get_db
from hands_of_hope.schemas.admin import AdminRole
from hands_of_hope.services.admin_service import AdminService
from hands_of_hope.services.email_service import EmailService, get_email_service
from hands_of_hope.services.payment_service import PaymentService

logger = structlog.get_logger(__name__)

# Security
security = HTTPBearer(auto_error=False)


async def get_current_admin_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> UUID:
    """
    Extract and validate the admin ID from a bearer token.

    Raises:
        UnauthorizedException: If the token is missing, invalid or expired
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Could not validate credentials")

    admin_id = payload.get("sub")
    if admin_id is None or not isinstance(admin_id, str):
        raise UnauthorizedException("Could not validate credentials")

    try:
        return UUID(admin_id)
    except ValueError:
        raise UnauthorizedException("Invalid token subject")


async def get_current_admin(
    admin_id: Annotated[UUID, Depends(get_current_admin_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """
    Load the authenticated admin.

    Raises:
        UnauthorizedException: If the account no longer exists
    """
    admin = await AdminService.get_admin_by_id(db, admin_id)
    if admin is None:
        raise UnauthorizedException("Account no longer exists")
    return admin


async def require_super_admin(
    current_admin: Annotated[dict, Depends(get_current_admin)],
) -> dict:
    """
    Ensure the authenticated admin is the super-admin.

    Raises:
        AccessDeniedException: If the admin has a regular role
    """
    if current_admin["role"] != AdminRole.SUPERADMIN:
        raise AccessDeniedException()
    return current_admin


def get_cache_manager(redis_client: Annotated[Any, Depends(get_redis_client)]) -> CacheManager:
    """Cache manager over the shared Redis client."""
    return CacheManager(redis_client)


def get_payment_service(
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> PaymentService:
    """Payment service wired to the configured email sender."""
    return PaymentService.from_settings(settings, email_service=email_service)


def rate_limited(scope: str) -> Callable[..., Awaitable[None]]:
    """
    Build a dependency limiting requests per client IP for ``scope``.

    Args:
        scope: Name of the limited action, part of the Redis key

    Returns:
        Dependency raising RateLimitException once the limit is hit
    """

    async def check(
        request: Request,
        redis_client: Annotated[Any, Depends(get_redis_client)],
    ) -> None:
        client = request.client.host if request.client else "unknown"
        limiter = RateLimiter(redis_client)
        if not limiter.check_rate_limit(
            f"rate_limit:{scope}:{client}",
            limit=settings.rate_limit_per_minute,
        ):
            logger.warning("rate_limit_exceeded", scope=scope, client=client)
            raise RateLimitException()

    return check


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
CurrentAdmin = Annotated[dict, Depends(get_current_admin)]
SuperAdmin = Annotated[dict, Depends(require_super_admin)]
CacheManagerDep = Annotated[CacheManager, Depends(get_cache_manager)]
EmailServiceDep = Annotated[EmailService, Depends(get_email_service)]
PaymentServiceDep = Annotated[PaymentService, Depends(get_payment_service)]
