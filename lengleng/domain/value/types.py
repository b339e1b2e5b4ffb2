"""Domain value objects for the invitation engine.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from lengleng.domain.value.common import RootValueObject, ValueObject


class InvitationStatus(str, Enum):
    """Status of an invitation.

    Forward-only: sent -> clicked -> installed, or sent|clicked -> expired.
    """

    SENT = "sent"
    CLICKED = "clicked"
    INSTALLED = "installed"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is possible."""
        return self in (InvitationStatus.INSTALLED, InvitationStatus.EXPIRED)


class MessageVariant(str, Enum):
    """Template family the invite message was drawn from."""

    STANDARD = "standard"
    TIME_BASED = "time_based"


class LedgerField(str, Enum):
    """Counter fields of a quota ledger that support atomic updates."""

    AVAILABLE_INVITES = "available_invites"
    TOTAL_INVITES_SENT = "total_invites_sent"
    TOTAL_INVITES_ACCEPTED = "total_invites_accepted"


_PHONE_ALLOWED = re.compile(r"^\+?[0-9 ()\-.]+$")


class PhoneNumber(RootValueObject[str]):
    """Recipient phone number as picked from the contact list.

    Only structural checks happen here; normalization to E.164 belongs to
    the contact integration.
    """

    @field_validator("root")
    @classmethod
    def validate_phone_number(cls, v: str) -> str:
        """Validate phone number is non-empty and plausibly formatted."""
        v = v.strip()
        if not v:
            raise ValueError("Phone number must not be empty")
        if not _PHONE_ALLOWED.match(v):
            raise ValueError("Phone number contains invalid characters")
        digits = sum(ch.isdigit() for ch in v)
        if digits < 7 or digits > 15:
            raise ValueError("Phone number must contain 7-15 digits")
        return v


class Contact(ValueObject):
    """Contact chosen from the address book to receive an invite."""

    phone_number: str
    name: str = ""
    school: Optional[str] = None  # Used to personalise templates


class TrackingData(ValueObject):
    """Conversion tracking attached to an invitation.

    clicked_at and installed_at are write-once; reminder_count only grows.
    reward_credited_at is set when the install award is claimed and cleared
    only if crediting the ledger fails, so a replayed install can finish it.
    """

    clicked_at: Optional[datetime] = None
    installed_at: Optional[datetime] = None
    reminder_count: int = Field(default=0, ge=0)
    last_reminder_sent: Optional[datetime] = None
    reward_credited_at: Optional[datetime] = None
