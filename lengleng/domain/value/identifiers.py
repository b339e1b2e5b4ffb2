"""Strongly typed identifiers for the invitation engine.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

# User IDs are opaque strings handed out by the identity provider
UserId = NewType("UserId", str)
InvitationId = NewType("InvitationId", UUID)


def parse_invitation_id(raw: str) -> InvitationId | None:
    """Parse an invitation ID from a deep link or callback; None if malformed."""
    try:
        return InvitationId(UUID(raw))
    except ValueError:
        return None
