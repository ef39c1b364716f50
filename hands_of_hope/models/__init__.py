"""Database models."""

from hands_of_hope.models.admins import admins
from hands_of_hope.models.base import metadata
from hands_of_hope.models.donations import donations
from hands_of_hope.models.events import event_registrations, events
from hands_of_hope.models.outreach import contact_messages, subscribers, volunteers

__all__ = [
    "admins",
    "contact_messages",
    "donations",
    "event_registrations",
    "events",
    "metadata",
    "subscribers",
    "volunteers",
]
