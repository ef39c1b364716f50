"""Donation model definition using SQLAlchemy Core."""

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Numeric,
    String,
    Table,
    Uuid,
    func,
    text,
)

from hands_of_hope.models.base import metadata

donations = Table(
    "donations",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    # Checkout session id from the payment provider
    Column("session_id", String(255), nullable=False, unique=True, index=True),
    Column("amount", Numeric(10, 2), nullable=False),
    Column("currency", String(3), nullable=False),
    Column("is_monthly", Boolean, nullable=False, server_default=text("false")),
    Column("donor_name", String(200)),
    Column("donor_email", String(255)),
    Column("payment_status", String(32), nullable=False),
    # Session metadata echoed back by the provider
    Column("session_metadata", JSON),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
