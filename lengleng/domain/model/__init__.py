"""Domain model entities for the invitation engine."""

from lengleng.domain.model.invitation import Invitation
from lengleng.domain.model.ledger import QuotaLedger
from lengleng.domain.model.notification import (
    InvitationMessage,
    InvitationReminder,
    InviteExpiringNudge,
    Notification,
)

__all__ = [
    "Invitation",
    "QuotaLedger",
    "Notification",
    "InvitationMessage",
    "InvitationReminder",
    "InviteExpiringNudge",
]
