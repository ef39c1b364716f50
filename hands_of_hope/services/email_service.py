"""Outbound transactional email over SMTP."""

from email.message import EmailMessage
from html import escape

import aiosmtplib
import structlog

from hands_of_hope.config import Settings, settings
from hands_of_hope.core.exceptions import EmailDeliveryException

logger = structlog.get_logger(__name__)


class EmailService:
    """Thin SMTP sender; one connection per message, no retries."""

    def __init__(
        self,
        hostname: str,
        port: int,
        sender: str,
        username: str | None = None,
        password: str | None = None,
        start_tls: bool = True,
        timeout: int = 30,
        inbox: str | None = None,
    ):
        """Initialize with SMTP connection details."""
        self.hostname = hostname
        self.port = port
        self.sender = sender
        self.inbox = inbox or sender
        self.username = username or None
        self.password = password or None
        self.start_tls = start_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, config: Settings) -> "EmailService":
        """Build a sender from application settings."""
        return cls(
            hostname=config.smtp_host,
            port=config.smtp_port,
            sender=config.email_from,
            username=config.smtp_username,
            password=config.smtp_password,
            start_tls=config.smtp_start_tls,
            timeout=config.smtp_timeout,
            inbox=config.inbox_address,
        )

    def build_message(
        self,
        to: str | list[str],
        subject: str,
        html: str,
    ) -> EmailMessage:
        """Compose an HTML message with a plain-text fallback."""
        recipients = [to] if isinstance(to, str) else list(to)

        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable email client.")
        message.add_alternative(html, subtype="html")
        return message

    async def send_email(
        self,
        to: str | list[str],
        subject: str,
        html: str,
        bcc: list[str] | None = None,
    ) -> None:
        """
        Send one message.

        Blind-copy addresses are passed only as SMTP envelope recipients,
        they never appear in the headers.

        Args:
            to: Visible recipient(s)
            subject: Subject line
            html: HTML body
            bcc: Hidden recipients

        Raises:
            EmailDeliveryException: If the SMTP exchange fails
        """
        message = self.build_message(to, subject, html)
        visible = [to] if isinstance(to, str) else list(to)
        recipients = visible + list(bcc or [])

        try:
            await aiosmtplib.send(
                message,
                recipients=recipients,
                hostname=self.hostname,
                port=self.port,
                username=self.username,
                password=self.password,
                # Port 465 is implicit TLS
                start_tls=self.start_tls and self.port != 465,
                use_tls=self.port == 465,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(
                "email_send_failed",
                subject=subject,
                recipient_count=len(recipients),
                error=str(e),
            )
            raise EmailDeliveryException() from e

        logger.info("email_sent", subject=subject, recipient_count=len(recipients))

    # Templates

    async def send_reset_code(self, to: str, code: str, ttl_minutes: int) -> None:
        """Email a password reset code."""
        await self.send_email(
            to,
            "Password Reset Code",
            f"<h3>Your Code: <b>{code}</b></h3>"
            f"<p>This code expires in {ttl_minutes} minutes. "
            "Ignore this email if you did not ask for it.</p>",
        )

    async def send_broadcast_approval(
        self, to: str, requested_by: str, subject: str, code: str
    ) -> None:
        """Email a broadcast approval code to the super-admin."""
        await self.send_email(
            to,
            f"Approval Needed: {subject}",
            f"<p>Admin <b>{escape(requested_by)}</b> wants to broadcast "
            f"&quot;{escape(subject)}&quot;.</p><h3>Approval Code: {code}</h3>",
        )

    async def send_newsletter(self, subject: str, message: str, recipients: list[str]) -> None:
        """Broadcast to all recipients as blind copies of one message."""
        await self.send_email(
            self.sender,
            subject,
            f'<div style="padding:20px;">{message}</div>',
            bcc=recipients,
        )

    async def send_event_ticket(self, to: str, name: str, event: dict) -> None:
        """Email a registration confirmation for an event."""
        location = event.get("location") or "TBA"
        await self.send_email(
            to,
            f"Your ticket: {event['title']}",
            f"<p>Hi {escape(name)},</p>"
            f"<p>You are registered for <b>{escape(event['title'])}</b>.</p>"
            f"<p>When: {event['event_date']:%B %d, %Y %H:%M}<br>Where: {escape(location)}</p>",
        )

    async def send_volunteer_notice(self, to: str, application: dict) -> None:
        """Tell the organization inbox about a new volunteer."""
        await self.send_email(
            to,
            f"New Volunteer: {application['first_name']}",
            f"<p>New application from {escape(application['first_name'])} "
            f"{escape(application['last_name'])} ({escape(application['email'])})</p>",
        )

    async def send_donation_receipt(self, to: str, donation: dict) -> None:
        """Email a donation receipt."""
        kind = "monthly donation" if donation["is_monthly"] else "donation"
        await self.send_email(
            to,
            "Thank you for your donation",
            f"<p>Thank you for your {kind} of "
            f"<b>{donation['amount']:.2f} {donation['currency'].upper()}</b>.</p>"
            f"<p>Reference: {escape(donation['session_id'])}</p>",
        )


def get_email_service() -> EmailService:
    """Dependency for the configured email sender."""
    return EmailService.from_settings(settings)
