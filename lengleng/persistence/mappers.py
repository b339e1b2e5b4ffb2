"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from datetime import datetime
from typing import Any, Dict
from uuid import UUID

from pydantic import TypeAdapter

from lengleng.domain.model import Invitation, Notification, QuotaLedger
from lengleng.domain.value import (
    InvitationId,
    InvitationStatus,
    MessageVariant,
    TrackingData,
    UserId,
)

_notification_adapter: TypeAdapter[Notification] = TypeAdapter(Notification)


def row_to_invitation(row: Dict[str, Any]) -> Invitation:
    """Convert database row to Invitation domain model.

    Args:
        row: Database row as dict

    Returns:
        Invitation domain model
    """
    return Invitation(
        id=InvitationId(UUID(row["id"]) if isinstance(row["id"], str) else row["id"]),
        sender_id=UserId(row["sender_id"]),
        recipient_phone=row["recipient_phone"],
        recipient_name=row.get("recipient_name") or "",
        message=row["message"],
        message_variant=MessageVariant(row["message_variant"]),
        status=InvitationStatus(row["status"]),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
        tracking_data=TrackingData(
            clicked_at=row.get("clicked_at"),
            installed_at=row.get("installed_at"),
            reminder_count=row.get("reminder_count", 0),
            last_reminder_sent=row.get("last_reminder_sent"),
            reward_credited_at=row.get("reward_credited_at"),
        ),
        version=row.get("version", 0),
    )


def invitation_to_dict(invitation: Invitation) -> Dict[str, Any]:
    """Convert Invitation domain model to database dict.

    Args:
        invitation: Invitation domain model

    Returns:
        Dict suitable for database insertion/update
    """
    tracking = invitation.tracking_data
    return {
        "id": invitation.id,
        "sender_id": invitation.sender_id,
        "recipient_phone": invitation.recipient_phone,
        "recipient_name": invitation.recipient_name,
        "message": invitation.message,
        "message_variant": invitation.message_variant.value,
        "status": invitation.status.value,
        "created_at": invitation.created_at,
        "expires_at": invitation.expires_at,
        "clicked_at": tracking.clicked_at,
        "installed_at": tracking.installed_at,
        "reminder_count": tracking.reminder_count,
        "last_reminder_sent": tracking.last_reminder_sent,
        "reward_credited_at": tracking.reward_credited_at,
        "version": invitation.version,
    }


def row_to_ledger(row: Dict[str, Any]) -> QuotaLedger:
    """Convert database row to QuotaLedger domain model."""
    return QuotaLedger(
        user_id=UserId(row["user_id"]),
        available_invites=row["available_invites"],
        total_invites_sent=row["total_invites_sent"],
        total_invites_accepted=row["total_invites_accepted"],
        invite_streak=row["invite_streak"],
        last_invite_award=row.get("last_invite_award"),
        premium_active=row.get("premium_active", False),
        version=row.get("version", 0),
        created_at=row["created_at"],
    )


def ledger_to_dict(ledger: QuotaLedger) -> Dict[str, Any]:
    """Convert QuotaLedger domain model to database dict."""
    return ledger.model_dump()


def notification_to_outbox_row(
    outbox_id: UUID, notification: Notification, deliver_after: datetime
) -> Dict[str, Any]:
    """Convert a notification to an outbox row.

    The payload is the JSON form of the tagged notification, so the
    transport can rebuild the exact variant with ``outbox_row_to_notification``.
    """
    return {
        "id": outbox_id,
        "kind": notification.kind,
        "payload": _notification_adapter.dump_python(notification, mode="json"),
        "deliver_after": deliver_after,
    }


def outbox_row_to_notification(row: Dict[str, Any]) -> Notification:
    """Rebuild the notification stored in an outbox row."""
    return _notification_adapter.validate_python(row["payload"])
