"""Admin model definition using SQLAlchemy Core."""

import uuid

from sqlalchemy import (
    Column,
    DateTime,
    CheckConstraint,
    Index,
    String,
    Table,
    Text,
    Uuid,
    func,
    text,
)

from hands_of_hope.models.base import metadata

admins = Table(
    "admins",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column("username", String(64), nullable=False, unique=True, index=True),
    Column("email", String(255), nullable=False, unique=True, index=True),
    Column("password_hash", Text, nullable=False),
    Column("role", String(20), nullable=False, server_default=text("'admin'")),
    # Password reset: token and expiry are always set and cleared together
    Column("reset_token", String(6)),
    Column("reset_token_expiry", DateTime(timezone=True)),
    # Pending broadcast approval code (only ever set on the super-admin)
    Column("approval_code", String(6)),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint("role IN ('admin', 'superadmin')", name="ck_admins_role"),
)

# At most one super-admin
Index(
    "uq_admins_single_superadmin",
    admins.c.role,
    unique=True,
    postgresql_where=admins.c.role == "superadmin",
    sqlite_where=admins.c.role == "superadmin",
)
