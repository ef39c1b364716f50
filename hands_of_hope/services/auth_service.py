"""Authentication service: login and password reset codes."""

from datetime import UTC, datetime, timedelta

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hands_of_hope.config import settings
from hands_of_hope.core.exceptions import (
    AccountNotFoundException,
    EmailDeliveryException,
    InvalidCredentialsException,
    InvalidOrExpiredCodeException,
)
from hands_of_hope.core.security import (
    OTP_LENGTH,
    create_access_token,
    dummy_verify,
    generate_otp,
    get_password_hash,
    verify_password,
)
from hands_of_hope.models.admins import admins
from hands_of_hope.services.admin_service import AdminService
from hands_of_hope.services.email_service import EmailService

logger = structlog.get_logger(__name__)


class AuthService:
    """Authentication service for admin accounts."""

    def __init__(
        self,
        email_service: EmailService | None = None,
        reset_code_ttl: timedelta | None = None,
    ):
        """Initialize auth service; the email sender is needed only for reset codes."""
        self.email = email_service
        self.reset_code_ttl = reset_code_ttl or timedelta(minutes=settings.reset_code_ttl_minutes)

    async def login(self, db: AsyncSession, username: str, password: str) -> dict:
        """
        Check a username/password pair.

        Args:
            db: Database session
            username: Admin username
            password: Plain password

        Returns:
            Dict with ``id``, ``username`` and ``role``

        Raises:
            InvalidCredentialsException: If the user is unknown or the password is wrong
        """
        admin = await AdminService.get_admin_by_username(db, username)

        if admin is None:
            dummy_verify()
            logger.info("login_failed", username=username, reason="unknown_user")
            raise InvalidCredentialsException()

        if not verify_password(password, admin["password_hash"]):
            logger.info("login_failed", username=username, reason="bad_password")
            raise InvalidCredentialsException()

        logger.info("login_succeeded", username=username, role=admin["role"])
        return {"id": admin["id"], "username": admin["username"], "role": admin["role"]}

    def create_token(self, identity: dict) -> str:
        """Issue an access token for a logged-in admin."""
        return create_access_token(
            data={
                "sub": str(identity["id"]),
                "username": identity["username"],
                "role": identity["role"],
            },
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )

    async def request_password_reset(self, db: AsyncSession, identifier: str) -> None:
        """
        Store a fresh reset code on the matching admin and email it.

        Any earlier pending code for the same admin is replaced.

        Args:
            db: Database session
            identifier: Username or email

        Raises:
            AccountNotFoundException: If no admin matches
            EmailDeliveryException: If there is no email sender or the code
                could not be sent
        """
        if self.email is None:
            raise EmailDeliveryException("No email sender configured")

        admin = await AdminService.get_admin_by_identifier(db, identifier)
        if admin is None:
            raise AccountNotFoundException()

        code = generate_otp()
        now = datetime.now(UTC)

        await db.execute(
            update(admins)
            .where(admins.c.id == admin["id"])
            .values(
                reset_token=code,
                reset_token_expiry=now + self.reset_code_ttl,
                updated_at=now,
            )
        )
        await db.commit()

        logger.info("password_reset_requested", admin_id=str(admin["id"]))

        await self.email.send_reset_code(
            admin["email"], code, int(self.reset_code_ttl.total_seconds() // 60)
        )

    async def reset_password(self, db: AsyncSession, code: str, new_password: str) -> None:
        """
        Consume a reset code and set a new password.

        The code, its expiry and the new hash are written in one conditional
        update, so a code can be used once only.

        Args:
            db: Database session
            code: Emailed 6-digit code
            new_password: Plain password, hashed before storage

        Raises:
            InvalidOrExpiredCodeException: If no admin holds this unexpired code
        """
        if len(code) != OTP_LENGTH or not code.isdigit():
            raise InvalidOrExpiredCodeException()

        now = datetime.now(UTC)
        valid = (
            admins.c.reset_token == code,
            admins.c.reset_token_expiry.is_not(None),
            admins.c.reset_token_expiry > now,
        )

        result = await db.execute(select(admins.c.id).where(*valid).limit(1))
        admin_id = result.scalar_one_or_none()
        if admin_id is None:
            raise InvalidOrExpiredCodeException()

        result = await db.execute(
            update(admins)
            .where(admins.c.id == admin_id, *valid)
            .values(
                password_hash=get_password_hash(new_password),
                reset_token=None,
                reset_token_expiry=None,
                updated_at=now,
            )
        )
        await db.commit()

        if result.rowcount == 0:  # type: ignore[attr-defined]
            # Consumed by a concurrent request
            raise InvalidOrExpiredCodeException()

        logger.info("password_reset_completed", admin_id=str(admin_id))
