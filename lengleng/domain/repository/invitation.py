"""Invitation repository interface."""

from abc import ABC, abstractmethod

from lengleng.domain.model.invitation import Invitation
from lengleng.domain.value import InvitationId, InvitationStatus, UserId


class InvitationRepository(ABC):
    """Repository for Invitation entity.

    Defines the contract for invitation persistence operations.
    Implementations must make ``save_if_version`` atomic per invitation;
    it is the only way stored invitations change.
    """

    @abstractmethod
    async def find_by_id(self, invitation_id: InvitationId) -> Invitation | None:
        """Find an invitation by ID.

        Args:
            invitation_id: The invitation's unique identifier

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation.

        Args:
            invitation: The invitation to store

        Returns:
            The stored invitation
        """
        pass

    @abstractmethod
    async def save_if_version(
        self, invitation: Invitation, expected_version: int
    ) -> bool:
        """Replace a stored invitation if nobody changed it in between.

        Args:
            invitation: The new state (its version already bumped)
            expected_version: Version the caller read before mutating

        Returns:
            True if the write happened, False on a version conflict or
            if the invitation does not exist
        """
        pass

    @abstractmethod
    async def find_by_sender(
        self,
        sender_id: UserId,
        status: InvitationStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        """Find invitations sent by a user, newest first.

        Args:
            sender_id: The sender's ID
            status: Optional status filter (stored status, before lazy expiry)
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of invitations
        """
        pass
