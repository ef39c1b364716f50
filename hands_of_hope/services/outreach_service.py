"""Public form intake: subscribers, volunteers and contact messages."""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hands_of_hope.core.exceptions import AlreadySubscribedException, EmailDeliveryException
from hands_of_hope.models.outreach import contact_messages, subscribers, volunteers
from hands_of_hope.schemas.outreach import ContactMessageCreate, VolunteerApplication
from hands_of_hope.services.email_service import EmailService

logger = structlog.get_logger(__name__)


class OutreachService:
    """Service for public form submissions."""

    def __init__(self, email_service: EmailService | None = None):
        """Initialize service with optional email sender."""
        self.email = email_service

    @staticmethod
    async def subscribe(db: AsyncSession, email: str) -> dict:
        """
        Add an address to the newsletter list.

        Raises:
            AlreadySubscribedException: If the address is already subscribed
        """
        email = email.strip().lower()

        existing = await db.execute(select(subscribers.c.id).where(subscribers.c.email == email))
        if existing.first():
            raise AlreadySubscribedException()

        try:
            result = await db.execute(
                subscribers.insert().values(email=email).returning(subscribers)
            )
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise AlreadySubscribedException()

        logger.info("subscriber_added")
        return dict(result.mappings().one())

    @staticmethod
    async def list_subscriber_emails(db: AsyncSession) -> list[str]:
        """All subscribed addresses."""
        result = await db.execute(select(subscribers.c.email).order_by(subscribers.c.created_at))
        return list(result.scalars().all())

    @staticmethod
    async def list_subscribers(db: AsyncSession) -> list[dict]:
        """Subscribers, newest first."""
        result = await db.execute(select(subscribers).order_by(subscribers.c.created_at.desc()))
        return [dict(row) for row in result.mappings().all()]

    async def apply_volunteer(self, db: AsyncSession, application: VolunteerApplication) -> dict:
        """
        Store a volunteer application and notify the organization inbox.

        The notification is best effort; the application is kept even if it fails.
        """
        result = await db.execute(
            volunteers.insert().values(**application.model_dump()).returning(volunteers)
        )
        await db.commit()
        volunteer = dict(result.mappings().one())

        logger.info("volunteer_application_received", volunteer_id=str(volunteer["id"]))

        if self.email:
            try:
                await self.email.send_volunteer_notice(self.email.inbox, volunteer)
            except EmailDeliveryException:
                logger.warning("volunteer_notice_not_sent", volunteer_id=str(volunteer["id"]))

        return volunteer

    @staticmethod
    async def list_volunteers(db: AsyncSession) -> list[dict]:
        """Volunteer applications, newest first."""
        result = await db.execute(select(volunteers).order_by(volunteers.c.created_at.desc()))
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def save_contact_message(db: AsyncSession, message: ContactMessageCreate) -> dict:
        """Store a contact form submission."""
        result = await db.execute(
            contact_messages.insert().values(**message.model_dump()).returning(contact_messages)
        )
        await db.commit()
        saved = dict(result.mappings().one())

        logger.info("contact_message_received", message_id=str(saved["id"]))
        return saved

    @staticmethod
    async def list_contact_messages(db: AsyncSession) -> list[dict]:
        """Contact messages, newest first."""
        result = await db.execute(
            select(contact_messages).order_by(contact_messages.c.created_at.desc())
        )
        return [dict(row) for row in result.mappings().all()]
