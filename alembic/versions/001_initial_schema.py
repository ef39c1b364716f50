"""Initial schema: admins, outreach forms, events and donations

Revision ID: 001
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def _created_at_column(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


def upgrade() -> None:
    """Create all tables."""

    # Admin accounts
    op.create_table(
        "admins",
        _id_column(),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'admin'")),
        sa.Column("reset_token", sa.String(6), nullable=True),
        sa.Column("reset_token_expiry", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("approval_code", sa.String(6), nullable=True),
        _created_at_column(),
        _created_at_column("updated_at"),
        sa.CheckConstraint("role IN ('admin', 'superadmin')", name="ck_admins_role"),
    )
    op.create_index("ix_admins_username", "admins", ["username"], unique=True)
    op.create_index("ix_admins_email", "admins", ["email"], unique=True)
    op.create_index(
        "uq_admins_single_superadmin",
        "admins",
        ["role"],
        unique=True,
        postgresql_where=sa.text("role = 'superadmin'"),
    )

    # Public forms
    op.create_table(
        "subscribers",
        _id_column(),
        sa.Column("email", sa.String(255), nullable=False),
        _created_at_column(),
    )
    op.create_index("ix_subscribers_email", "subscribers", ["email"], unique=True)

    op.create_table(
        "volunteers",
        _id_column(),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("skills", sa.Text(), nullable=True),
        sa.Column("availability", sa.Text(), nullable=True),
        _created_at_column(),
    )

    op.create_table(
        "contact_messages",
        _id_column(),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(255), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        _created_at_column(),
    )

    # Events
    op.create_table(
        "events",
        _id_column(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        _created_at_column(),
    )
    op.create_index("ix_events_event_date", "events", ["event_date"])

    op.create_table(
        "event_registrations",
        _id_column(),
        sa.Column(
            "event_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        _created_at_column("registered_at"),
        sa.UniqueConstraint("event_id", "email", name="uq_event_registrations_event_email"),
    )
    op.create_index("ix_event_registrations_event_id", "event_registrations", ["event_id"])

    # Donations
    op.create_table(
        "donations",
        _id_column(),
        sa.Column("session_id", sa.String(255), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("is_monthly", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("donor_name", sa.String(200), nullable=True),
        sa.Column("donor_email", sa.String(255), nullable=True),
        sa.Column("payment_status", sa.String(32), nullable=False),
        sa.Column("session_metadata", postgresql.JSON(), nullable=True),
        _created_at_column(),
    )
    op.create_index("ix_donations_session_id", "donations", ["session_id"], unique=True)


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("donations")
    op.drop_table("event_registrations")
    op.drop_table("events")
    op.drop_table("contact_messages")
    op.drop_table("volunteers")
    op.drop_table("subscribers")
    op.drop_table("admins")
