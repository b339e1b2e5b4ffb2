"""In-memory invitation repository for testing."""

from typing import Optional

from lengleng.domain.model.invitation import Invitation
from lengleng.domain.repository.invitation import InvitationRepository
from lengleng.domain.value import InvitationId, InvitationStatus, UserId


class InMemoryInvitationRepository(InvitationRepository):
    """In-memory implementation of InvitationRepository for testing.

    No method awaits between reading and writing, so every call is atomic
    on the event loop.
    """

    def __init__(self) -> None:
        self._invitations: dict[InvitationId, Invitation] = {}

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID."""
        return self._invitations.get(invitation_id)

    async def save(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation.

        Raises:
            ValueError: If an invitation with this ID already exists
        """
        if invitation.id in self._invitations:
            raise ValueError(f"Invitation {invitation.id} already exists")
        self._invitations[invitation.id] = invitation
        return invitation

    async def save_if_version(
        self, invitation: Invitation, expected_version: int
    ) -> bool:
        """Replace an invitation if its stored version still matches."""
        stored = self._invitations.get(invitation.id)
        if stored is None or stored.version != expected_version:
            return False
        self._invitations[invitation.id] = invitation
        return True

    async def find_by_sender(
        self,
        sender_id: UserId,
        status: Optional[InvitationStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        """Find invitations by sender, newest first."""
        invitations = [
            inv
            for inv in self._invitations.values()
            if inv.sender_id == sender_id and (status is None or inv.status == status)
        ]
        invitations.sort(key=lambda inv: inv.created_at, reverse=True)
        return invitations[offset : offset + limit]
