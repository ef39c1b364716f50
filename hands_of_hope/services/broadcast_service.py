"""Newsletter broadcast with super-admin approval codes."""

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from hands_of_hope.core.exceptions import (
    AccessDeniedException,
    InvalidOtpException,
    NoSubscribersException,
)
from hands_of_hope.core.security import generate_otp
from hands_of_hope.models.admins import admins
from hands_of_hope.schemas.admin import AdminRole
from hands_of_hope.services.admin_service import AdminService
from hands_of_hope.services.email_service import EmailService
from hands_of_hope.services.outreach_service import OutreachService

logger = structlog.get_logger(__name__)


class BroadcastService:
    """
    Two-step broadcast authorization.

    A regular admin asks for an approval code, which is stored on the
    super-admin record and emailed to the super-admin. The regular admin then
    sends the broadcast with that code. Only one code is pending at a time;
    it has no expiry and is cleared when used.
    """

    def __init__(self, email_service: EmailService):
        """Initialize with an email sender."""
        self.email = email_service

    async def request_broadcast_otp(
        self, db: AsyncSession, current_user: str, subject: str
    ) -> None:
        """
        Generate an approval code and send it to the super-admin.

        Args:
            db: Database session
            current_user: Username of the admin who wants to broadcast
            subject: Subject of the planned broadcast

        Raises:
            SuperAdminNotConfiguredException: If there is no super-admin
            EmailDeliveryException: If the code could not be sent
        """
        super_admin = await AdminService.get_super_admin(db)
        code = generate_otp()

        await db.execute(
            update(admins).where(admins.c.id == super_admin["id"]).values(approval_code=code)
        )
        await db.commit()

        logger.info("broadcast_approval_requested", requested_by=current_user, subject=subject)

        await self.email.send_broadcast_approval(super_admin["email"], current_user, subject, code)

    async def consume_approval_code(self, db: AsyncSession, otp: str | None) -> None:
        """
        Clear the pending approval code if ``otp`` matches it.

        A mismatch leaves the stored code in place.

        Raises:
            InvalidOtpException: If ``otp`` is empty or does not match
        """
        if not otp:
            raise InvalidOtpException()

        result = await db.execute(
            update(admins)
            .where(
                admins.c.role == AdminRole.SUPERADMIN.value,
                admins.c.approval_code == otp,
            )
            .values(approval_code=None)
        )
        await db.commit()

        if result.rowcount == 0:  # type: ignore[attr-defined]
            logger.warning("broadcast_otp_rejected")
            raise InvalidOtpException()

    async def send_newsletter(
        self,
        db: AsyncSession,
        subject: str,
        message: str,
        current_user: str,
        otp: str | None = None,
    ) -> int:
        """
        Send a broadcast to every subscriber.

        The super-admin sends directly; anyone else needs the pending
        approval code.

        Args:
            db: Database session
            subject: Subject line
            message: HTML body
            current_user: Username of the sender
            otp: Approval code, required unless the sender is the super-admin

        Returns:
            Number of subscribers the broadcast went to

        Raises:
            AccessDeniedException: If the sender is unknown
            InvalidOtpException: If approval is required and the code is wrong
            NoSubscribersException: If there is nobody to send to
            EmailDeliveryException: If sending failed
        """
        sender = await AdminService.get_admin_by_username(db, current_user)
        if sender is None:
            raise AccessDeniedException()

        if sender["role"] != AdminRole.SUPERADMIN:
            await self.consume_approval_code(db, otp)

        recipients = await OutreachService.list_subscriber_emails(db)
        if not recipients:
            raise NoSubscribersException()

        await self.email.send_newsletter(subject, message, recipients)

        logger.info(
            "broadcast_sent",
            sender=current_user,
            subject=subject,
            recipient_count=len(recipients),
        )
        return len(recipients)
