"""Event and registration models."""

import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)

from hands_of_hope.models.base import metadata

events = Table(
    "events",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column("title", String(200), nullable=False),
    Column("description", Text),
    Column("event_date", DateTime(timezone=True), nullable=False, index=True),
    Column("location", String(255)),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

# Registrants of an event, unique per email
event_registrations = Table(
    "event_registrations",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column(
        "event_id",
        Uuid,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", String(200), nullable=False),
    Column("email", String(255), nullable=False),
    Column("registered_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    UniqueConstraint("event_id", "email", name="uq_event_registrations_event_email"),
)
