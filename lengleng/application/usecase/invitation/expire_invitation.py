"""Expiry use cases."""

import logfire
from pydantic import BaseModel

from lengleng.application.usecase.base import BaseUseCase
from lengleng.domain.model import Invitation
from lengleng.domain.service import InvitationService
from lengleng.domain.value import InvitationStatus, UserId, parse_invitation_id


class ExpireInvitationRequest(BaseModel):
    """Expire invitation request."""

    invitation_id: str  # UUID string


class ExpireInvitationResponse(BaseModel):
    """Expire invitation response."""

    invitation: Invitation | None = None
    expired: bool = False


class ExpireInvitationUseCase(BaseUseCase):
    """Use case for forcing the expiry check on one invitation."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(
        self, request: ExpireInvitationRequest
    ) -> ExpireInvitationResponse:
        """Apply the expiry check.

        Args:
            request: Expire request

        Returns:
            Current state of the invitation and whether it is expired
        """
        invitation_id = parse_invitation_id(request.invitation_id)
        invitation = (
            await self.invitation_service.expire(invitation_id)
            if invitation_id is not None
            else None
        )
        if invitation is None:
            logfire.warn(
                "Expire for unknown invitation", invitation_id=request.invitation_id
            )
            return ExpireInvitationResponse()

        return ExpireInvitationResponse(
            invitation=invitation,
            expired=invitation.status == InvitationStatus.EXPIRED,
        )


class SweepExpiredRequest(BaseModel):
    """Sweep request for one sender."""

    sender_id: str


class SweepExpiredResponse(BaseModel):
    """Invitations moved to expired by the sweep."""

    expired: list[Invitation]


class SweepExpiredUseCase(BaseUseCase):
    """Use case for a periodic expiry sweep over a sender's invitations."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(self, request: SweepExpiredRequest) -> SweepExpiredResponse:
        expired = await self.invitation_service.sweep_expired(
            UserId(request.sender_id)
        )
        return SweepExpiredResponse(expired=expired)
