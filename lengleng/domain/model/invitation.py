"""Invitation entity.

An invitation is one outbound referral sent by SMS to a contact. It is
tracked through send -> click -> install, or expires after its TTL.
"""

from datetime import datetime, timedelta

from pydantic import Field

from lengleng.domain.model.common import DomainModel
from lengleng.domain.value import (
    InvitationId,
    InvitationStatus,
    MessageVariant,
    TrackingData,
    UserId,
)


class Invitation(DomainModel):
    """Invitation entity.

    Business rules:
    - Contact snapshot, message and timestamps never change after creation
    - Status only moves forward; installed and expired are terminal
    - clicked_at / installed_at are written at most once
    - Expiry is evaluated lazily by whoever reads the invitation
    - Invitations are never deleted (kept for history)
    """

    id: InvitationId
    sender_id: UserId
    recipient_phone: str
    recipient_name: str
    message: str
    message_variant: MessageVariant = MessageVariant.STANDARD
    created_at: datetime
    expires_at: datetime
    status: InvitationStatus = InvitationStatus.SENT
    tracking_data: TrackingData = Field(default_factory=TrackingData)
    version: int = Field(default=0, ge=0)  # Bumped on every stored mutation

    @property
    def is_active(self) -> bool:
        """Whether the invitation can still convert (sent or clicked)."""
        return not self.status.is_terminal

    def is_due_for_expiry(self, now: datetime) -> bool:
        """Whether a read at ``now`` must move this invitation to expired."""
        return self.is_active and now >= self.expires_at

    def time_remaining(self, now: datetime) -> timedelta:
        """Time left until expiry, never negative."""
        return max(self.expires_at - now, timedelta(0))
