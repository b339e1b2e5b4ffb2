"""initial_schema

Create the schema for the invitation engine:
- Invitations (one row per outbound referral, lifecycle + tracking)
- Quota ledgers (one row per user, invite quota and stats)
- Notification outbox (queued SMS/push for the delivery transport)

Revision ID: 3f2c9d41a7e0
Revises:
Create Date: 2025-11-03 10:12:44.518302

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f2c9d41a7e0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # INVITATIONS table
    # ========================================================================
    op.create_table(
        "invitations",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("sender_id", sa.String(128), nullable=False),
        sa.Column("recipient_phone", sa.String(32), nullable=False),
        sa.Column("recipient_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("message_variant", sa.String(32), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("clicked_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("installed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("reminder_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_reminder_sent", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("reward_credited_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('sent', 'clicked', 'installed', 'expired')",
            name="ck_invitation_status",
        ),
        sa.CheckConstraint("reminder_count >= 0", name="ck_invitation_reminder_count"),
    )
    op.create_index(
        "idx_invitations_sender_created",
        "invitations",
        ["sender_id", sa.text("created_at DESC")],
    )
    op.create_index(
        "idx_invitations_sender_status", "invitations", ["sender_id", "status"]
    )

    # ========================================================================
    # QUOTA_LEDGERS table
    # ========================================================================
    op.create_table(
        "quota_ledgers",
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column(
            "available_invites", sa.Integer(), nullable=False, server_default="10"
        ),
        sa.Column(
            "total_invites_sent", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column(
            "total_invites_accepted", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column("invite_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_invite_award", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "premium_active", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("user_id"),
        sa.CheckConstraint(
            "available_invites >= 0", name="ck_ledger_available_invites"
        ),
    )

    # ========================================================================
    # NOTIFICATION_OUTBOX table
    # ========================================================================
    op.create_table(
        "notification_outbox",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("kind", sa.String(32), nullable=False),
        sa.Column("payload", postgresql.JSONB(), nullable=False),
        sa.Column("deliver_after", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("dispatched_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_notification_outbox_pending",
        "notification_outbox",
        ["deliver_after"],
        postgresql_where=sa.text("dispatched_at IS NULL"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_notification_outbox_pending", table_name="notification_outbox")
    op.drop_table("notification_outbox")
    op.drop_table("quota_ledgers")
    op.drop_index("idx_invitations_sender_status", table_name="invitations")
    op.drop_index("idx_invitations_sender_created", table_name="invitations")
    op.drop_table("invitations")
