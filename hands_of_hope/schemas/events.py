"""Event schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from hands_of_hope.schemas.base import CamelModel


class EventCreate(CamelModel):
    """New event."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    date: datetime = Field(..., description="Event start (ISO 8601)")
    location: str | None = Field(default=None, max_length=255)


class EventDeleteRequest(CamelModel):
    """Event to remove."""

    event_id: UUID


class EventRegistrationRequest(CamelModel):
    """Register a person for an event."""

    event_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr


class RegistrantResponse(CamelModel):
    """Event registrant."""

    name: str
    email: str
    registered_at: datetime | None = None


class EventResponse(CamelModel):
    """Public view of an event."""

    id: UUID
    title: str
    description: str | None = None
    date: datetime
    location: str | None = None
    registrant_count: int = 0


class EventDetailResponse(EventResponse):
    """Admin view of an event including registrants."""

    registrants: list[RegistrantResponse] = []


class EventCreatedResponse(CamelModel):
    """Acknowledgement with the new event."""

    success: bool = True
    event: EventResponse
