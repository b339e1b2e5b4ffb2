"""SQLAlchemy table definitions for the invitation engine.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# INVITATIONS TABLE
# ============================================================================
invitations_table = Table(
    "invitations",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("sender_id", String(128), nullable=False),  # Identity provider user ID
    Column("recipient_phone", String(32), nullable=False),
    Column("recipient_name", String(255), nullable=False, server_default=""),
    Column("message", Text, nullable=False),
    Column("message_variant", String(32), nullable=False),
    Column("status", String(16), nullable=False),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    # Tracking data (flattened)
    Column("clicked_at", TIMESTAMP(timezone=True), nullable=True),
    Column("installed_at", TIMESTAMP(timezone=True), nullable=True),
    Column("reminder_count", Integer, nullable=False, server_default="0"),
    Column("last_reminder_sent", TIMESTAMP(timezone=True), nullable=True),
    Column("reward_credited_at", TIMESTAMP(timezone=True), nullable=True),
    # Optimistic concurrency
    Column("version", Integer, nullable=False, server_default="0"),
    CheckConstraint(
        "status IN ('sent', 'clicked', 'installed', 'expired')",
        name="ck_invitation_status",
    ),
    CheckConstraint("reminder_count >= 0", name="ck_invitation_reminder_count"),
)

Index(
    "idx_invitations_sender_created",
    invitations_table.c.sender_id,
    invitations_table.c.created_at.desc(),
)
Index(
    "idx_invitations_sender_status",
    invitations_table.c.sender_id,
    invitations_table.c.status,
)

# ============================================================================
# QUOTA LEDGERS TABLE (one row per user)
# ============================================================================
quota_ledgers_table = Table(
    "quota_ledgers",
    metadata,
    Column("user_id", String(128), primary_key=True),
    Column("available_invites", Integer, nullable=False, server_default="10"),
    Column("total_invites_sent", Integer, nullable=False, server_default="0"),
    Column("total_invites_accepted", Integer, nullable=False, server_default="0"),
    Column("invite_streak", Integer, nullable=False, server_default="0"),
    Column("last_invite_award", TIMESTAMP(timezone=True), nullable=True),
    Column("premium_active", Boolean, nullable=False, server_default="false"),
    Column("version", Integer, nullable=False, server_default="0"),
    Column(
        "created_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    ),
    CheckConstraint("available_invites >= 0", name="ck_ledger_available_invites"),
)

# ============================================================================
# NOTIFICATION OUTBOX TABLE (drained by the delivery transport)
# ============================================================================
notification_outbox_table = Table(
    "notification_outbox",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("kind", String(32), nullable=False),
    Column("payload", JSONB, nullable=False),
    Column("deliver_after", TIMESTAMP(timezone=True), nullable=False),
    Column(
        "created_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    ),
    Column("dispatched_at", TIMESTAMP(timezone=True), nullable=True),
)

Index(
    "idx_notification_outbox_pending",
    notification_outbox_table.c.deliver_after,
    postgresql_where=notification_outbox_table.c.dispatched_at.is_(None),
)
