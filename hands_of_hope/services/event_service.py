"""Event service: event management and registrations."""

from uuid import UUID

import structlog
from fastapi.encoders import jsonable_encoder
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hands_of_hope.core.exceptions import (
    AlreadyRegisteredException,
    EmailDeliveryException,
    NotFoundException,
)
from hands_of_hope.core.redis_client import CacheManager
from hands_of_hope.models.events import event_registrations, events
from hands_of_hope.schemas.events import EventCreate
from hands_of_hope.services.email_service import EmailService

logger = structlog.get_logger(__name__)


class EventService:
    """Service for events and their registrants."""

    # Public listing cache (5 minutes)
    EVENT_LIST_CACHE_KEY = "events:list"
    EVENT_LIST_CACHE_TTL = 300

    def __init__(
        self,
        email_service: EmailService | None = None,
        cache_manager: CacheManager | None = None,
    ):
        """Initialize service with optional email sender and cache manager."""
        self.email = email_service
        self.cache = cache_manager

    def _invalidate_list(self) -> None:
        if self.cache:
            self.cache.delete(self.EVENT_LIST_CACHE_KEY)

    @staticmethod
    def _to_public(row: dict, registrant_count: int = 0) -> dict:
        return {
            "id": row["id"],
            "title": row["title"],
            "description": row["description"],
            "date": row["event_date"],
            "location": row["location"],
            "registrant_count": registrant_count,
        }

    async def list_events(self, db: AsyncSession) -> list[dict]:
        """List events by date with registrant counts, cached."""
        if self.cache:
            cached = self.cache.get_json(self.EVENT_LIST_CACHE_KEY)
            if cached is not None:
                return cached

        counts = (
            select(
                event_registrations.c.event_id,
                func.count().label("registrant_count"),
            )
            .group_by(event_registrations.c.event_id)
            .subquery()
        )
        query = (
            select(events, func.coalesce(counts.c.registrant_count, 0).label("registrant_count"))
            .select_from(events.outerjoin(counts, counts.c.event_id == events.c.id))
            .order_by(events.c.event_date)
        )
        result = await db.execute(query)
        event_list = [
            self._to_public(dict(row), row["registrant_count"]) for row in result.mappings().all()
        ]

        if self.cache:
            self.cache.set_json(
                self.EVENT_LIST_CACHE_KEY,
                jsonable_encoder(event_list),
                ttl=self.EVENT_LIST_CACHE_TTL,
            )

        return event_list

    async def list_events_with_registrants(self, db: AsyncSession) -> list[dict]:
        """Events with full registrant lists, newest first."""
        result = await db.execute(select(events).order_by(events.c.event_date.desc()))
        event_rows = [dict(row) for row in result.mappings().all()]

        result = await db.execute(
            select(event_registrations).order_by(event_registrations.c.registered_at)
        )
        by_event: dict[UUID, list[dict]] = {}
        for row in result.mappings().all():
            by_event.setdefault(row["event_id"], []).append(dict(row))

        detailed = []
        for row in event_rows:
            registrants = by_event.get(row["id"], [])
            event = self._to_public(row, len(registrants))
            event["registrants"] = registrants
            detailed.append(event)
        return detailed

    async def get_event(self, db: AsyncSession, event_id: UUID) -> dict | None:
        """Get event by ID."""
        result = await db.execute(select(events).where(events.c.id == event_id))
        event = result.mappings().first()
        return dict(event) if event else None

    async def create_event(self, db: AsyncSession, event_data: EventCreate) -> dict:
        """Create an event."""
        result = await db.execute(
            events.insert()
            .values(
                title=event_data.title,
                description=event_data.description,
                event_date=event_data.date,
                location=event_data.location,
            )
            .returning(events)
        )
        await db.commit()
        event = dict(result.mappings().one())

        self._invalidate_list()
        logger.info("event_created", event_id=str(event["id"]), title=event["title"])
        return self._to_public(event)

    async def delete_event(self, db: AsyncSession, event_id: UUID) -> None:
        """
        Delete an event and its registrations.

        Raises:
            NotFoundException: If the event does not exist
        """
        await db.execute(
            delete(event_registrations).where(event_registrations.c.event_id == event_id)
        )
        result = await db.execute(delete(events).where(events.c.id == event_id))

        if result.rowcount == 0:  # type: ignore[attr-defined]
            await db.rollback()
            raise NotFoundException("Event not found")

        await db.commit()
        self._invalidate_list()
        logger.info("event_deleted", event_id=str(event_id))

    async def register(self, db: AsyncSession, event_id: UUID, name: str, email: str) -> dict:
        """
        Register a person for an event and email them a ticket.

        The registration is committed before the ticket is sent; a failed
        ticket email does not undo it.

        Args:
            db: Database session
            event_id: Event to register for
            name: Registrant name
            email: Registrant email, unique per event

        Returns:
            The registration

        Raises:
            NotFoundException: If the event does not exist
            AlreadyRegisteredException: If the email is already registered
        """
        event = await self.get_event(db, event_id)
        if event is None:
            raise NotFoundException("Event not found")

        email = email.strip().lower()
        existing = await db.execute(
            select(event_registrations.c.id).where(
                event_registrations.c.event_id == event_id,
                event_registrations.c.email == email,
            )
        )
        if existing.first():
            raise AlreadyRegisteredException()

        try:
            result = await db.execute(
                event_registrations.insert()
                .values(event_id=event_id, name=name, email=email)
                .returning(event_registrations)
            )
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise AlreadyRegisteredException()

        registration = dict(result.mappings().one())
        self._invalidate_list()
        logger.info("event_registration_added", event_id=str(event_id))

        if self.email:
            try:
                await self.email.send_event_ticket(email, name, event)
            except EmailDeliveryException:
                logger.warning("event_ticket_not_sent", event_id=str(event_id))

        return registration
