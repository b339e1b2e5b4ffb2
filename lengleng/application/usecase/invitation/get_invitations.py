"""Get invitations use case."""

import logfire
from pydantic import BaseModel, Field

from lengleng.application.usecase.base import BaseUseCase
from lengleng.domain.model import Invitation
from lengleng.domain.service import InvitationService, QuotaLedgerService
from lengleng.domain.value import InvitationStatus, UserId


class GetInvitationsRequest(BaseModel):
    """Invite history request."""

    sender_id: str
    status: InvitationStatus | None = None
    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class GetInvitationsResponse(BaseModel):
    """Invite history with the sender's stats."""

    invitations: list[Invitation]
    available_invites: int
    total_invites_sent: int
    total_invites_accepted: int
    acceptance_rate: float


class GetInvitationsUseCase(BaseUseCase):
    """Use case for a sender's invite history screen."""

    def __init__(
        self,
        invitation_service: InvitationService,
        ledger_service: QuotaLedgerService,
    ) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation lifecycle service
            ledger_service: Quota ledger service
        """
        self.invitation_service = invitation_service
        self.ledger_service = ledger_service

    async def execute(self, request: GetInvitationsRequest) -> GetInvitationsResponse:
        """List invitations, newest first, with expiry applied.

        Args:
            request: History request

        Returns:
            Invitations and ledger stats
        """
        sender_id = UserId(request.sender_id)

        with logfire.span("get_invitations.execute", sender_id=sender_id):
            invitations = await self.invitation_service.list_invitations(
                sender_id,
                status=request.status,
                limit=request.limit,
                offset=request.offset,
            )
            ledger = await self.ledger_service.get_ledger(sender_id)

            return GetInvitationsResponse(
                invitations=invitations,
                available_invites=ledger.available_invites,
                total_invites_sent=ledger.total_invites_sent,
                total_invites_accepted=ledger.total_invites_accepted,
                acceptance_rate=ledger.acceptance_rate,
            )
