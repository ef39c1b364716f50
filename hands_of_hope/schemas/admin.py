"""Admin-specific schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import EmailStr, Field

from hands_of_hope.schemas.base import CamelModel
from hands_of_hope.schemas.donations import DonationResponse
from hands_of_hope.schemas.events import EventDetailResponse
from hands_of_hope.schemas.outreach import (
    ContactMessageResponse,
    SubscriberResponse,
    VolunteerResponse,
)


class AdminRole(str, Enum):
    """Closed set of admin roles."""

    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class AddAdminRequest(CamelModel):
    """Super-admin request to create a regular admin."""

    new_username: str = Field(..., min_length=3, max_length=64)
    new_email: EmailStr
    new_password: str = Field(..., min_length=8, max_length=128)


class DeleteAdminRequest(CamelModel):
    """Super-admin request to delete another admin."""

    target_id: UUID


class AdminResponse(CamelModel):
    """Admin record with credentials and pending codes removed."""

    id: UUID
    username: str
    email: str
    role: AdminRole
    created_at: datetime | None = None


class AdminDataResponse(CamelModel):
    """Everything the admin dashboard shows."""

    volunteers: list[VolunteerResponse]
    messages: list[ContactMessageResponse]
    subscribers: list[SubscriberResponse]
    admins: list[AdminResponse]
    events: list[EventDetailResponse]
    donations: list[DonationResponse]
