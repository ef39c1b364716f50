"""Public form schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from hands_of_hope.schemas.base import CamelModel


class SubscribeRequest(CamelModel):
    """Newsletter sign-up."""

    email: EmailStr


class SubscriberResponse(CamelModel):
    """Newsletter subscriber."""

    id: UUID
    email: str
    created_at: datetime | None = None


class VolunteerApplication(CamelModel):
    """Volunteer application form."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=32)
    skills: str | None = None
    availability: str | None = None


class VolunteerResponse(VolunteerApplication):
    """Stored volunteer application."""

    id: UUID
    email: str
    created_at: datetime | None = None


class ContactMessageCreate(CamelModel):
    """Contact form."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    subject: str | None = Field(default=None, max_length=255)
    message: str = Field(..., min_length=1)


class ContactMessageResponse(ContactMessageCreate):
    """Stored contact message."""

    id: UUID
    email: str
    created_at: datetime | None = None
