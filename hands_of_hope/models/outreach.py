"""Public form intake models: subscribers, volunteers, contact messages."""

import uuid

from sqlalchemy import Column, DateTime, String, Table, Text, Uuid, func

from hands_of_hope.models.base import metadata

subscribers = Table(
    "subscribers",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column("email", String(255), nullable=False, unique=True, index=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

volunteers = Table(
    "volunteers",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(255), nullable=False),
    Column("phone", String(32)),
    Column("skills", Text),
    Column("availability", Text),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

contact_messages = Table(
    "contact_messages",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(255), nullable=False),
    Column("subject", String(255)),
    Column("message", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
