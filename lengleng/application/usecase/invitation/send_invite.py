"""Send invite use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from lengleng.application.usecase.base import BaseUseCase
from lengleng.config import InvitationSettings
from lengleng.domain.model import Invitation
from lengleng.domain.service import (
    InvitationService,
    MessageComposer,
    QuotaLedgerService,
    ReminderScheduler,
)
from lengleng.domain.value import Contact, UserId


class SendInviteRequest(BaseModel):
    """Request to send one invitation."""

    sender_id: str
    contact: Contact
    message: str | None = None  # Template message if omitted
    deadline: datetime | None = None


class SendInviteResponse(BaseModel):
    """Response after a successful send."""

    invitation: Invitation
    invite_link: str
    available_invites: int | None = None  # None if the quota read failed
    expiry_nudge_scheduled: bool = False


class SendInviteUseCase(BaseUseCase):
    """Use case for sending an invitation to a contact.

    Spends one invite of the sender's quota. Errors from the lifecycle
    service (invalid contact, no invites, send failed) propagate unchanged.
    """

    def __init__(
        self,
        invitation_service: InvitationService,
        ledger_service: QuotaLedgerService,
        reminder_scheduler: ReminderScheduler,
        message_composer: MessageComposer,
        settings: InvitationSettings,
    ) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation lifecycle service
            ledger_service: Quota ledger service
            reminder_scheduler: Reminder scheduler (expiry nudge)
            message_composer: Builds the invite link
            settings: Invitation settings
        """
        self.invitation_service = invitation_service
        self.ledger_service = ledger_service
        self.reminder_scheduler = reminder_scheduler
        self.message_composer = message_composer
        self.settings = settings

    async def execute(self, request: SendInviteRequest) -> SendInviteResponse:
        """Execute send invite use case.

        Args:
            request: Send invite request

        Returns:
            The sent invitation and the sender's remaining quota. Failures
            after delivery are logged, never raised.

        Raises:
            InvalidContactError: If the contact's phone number is invalid
            NoInvitesRemainingError: If the sender has no quota left
            SendFailedError: If persisting or delivering failed
        """
        sender_id = UserId(request.sender_id)

        with logfire.span("send_invite.execute", sender_id=sender_id):
            invitation = await self.invitation_service.send_invite(
                sender_id,
                request.contact,
                message=request.message,
                deadline=request.deadline,
            )

            nudge = None
            if self.settings.schedule_expiry_nudge:
                try:
                    nudge = await self.reminder_scheduler.schedule_expiry_nudge(
                        invitation
                    )
                except Exception as e:
                    logfire.error(
                        "Scheduling expiry nudge failed",
                        invitation_id=str(invitation.id),
                        error=repr(e),
                    )

            # The invite is already delivered; report it even if the quota read fails
            available_invites = None
            try:
                ledger = await self.ledger_service.get_ledger(sender_id)
                available_invites = ledger.available_invites
            except Exception as e:
                logfire.error(
                    "Reading quota after send failed",
                    sender_id=sender_id,
                    error=repr(e),
                )

            return SendInviteResponse(
                invitation=invitation,
                invite_link=self.message_composer.invite_link(invitation.id),
                available_invites=available_invites,
                expiry_nudge_scheduled=nudge is not None,
            )
