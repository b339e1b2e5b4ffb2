"""Domain value objects for the invitation engine."""

from lengleng.domain.value.identifiers import (
    InvitationId,
    UserId,
    parse_invitation_id,
)
from lengleng.domain.value.types import (
    Contact,
    InvitationStatus,
    LedgerField,
    MessageVariant,
    PhoneNumber,
    TrackingData,
)

__all__ = [
    # Identifiers
    "UserId",
    "InvitationId",
    "parse_invitation_id",
    # Types
    "Contact",
    "InvitationStatus",
    "LedgerField",
    "MessageVariant",
    "PhoneNumber",
    "TrackingData",
]
