"""Send reminder use cases."""

import logfire
from pydantic import BaseModel

from lengleng.application.usecase.base import BaseUseCase
from lengleng.domain.model import InvitationReminder
from lengleng.domain.service import InvitationService, ReminderScheduler
from lengleng.domain.value import UserId, parse_invitation_id


class SendReminderRequest(BaseModel):
    """Send reminder request."""

    invitation_id: str  # UUID string


class SendReminderResponse(BaseModel):
    """Send reminder response."""

    scheduled: bool
    reminder: InvitationReminder | None = None


class SendReminderUseCase(BaseUseCase):
    """Use case for reminding one recipient.

    Terminal, expired and unknown invitations are skipped, never errors.
    """

    def __init__(
        self,
        invitation_service: InvitationService,
        reminder_scheduler: ReminderScheduler,
    ) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation lifecycle service
            reminder_scheduler: Reminder scheduler
        """
        self.invitation_service = invitation_service
        self.reminder_scheduler = reminder_scheduler

    async def execute(self, request: SendReminderRequest) -> SendReminderResponse:
        """Schedule a reminder if the invitation is still pending.

        Args:
            request: Send reminder request

        Returns:
            Whether a reminder was scheduled
        """
        with logfire.span("send_reminder.execute", invitation_id=request.invitation_id):
            invitation_id = parse_invitation_id(request.invitation_id)
            invitation = (
                await self.invitation_service.get_invitation(invitation_id)
                if invitation_id is not None
                else None
            )
            if invitation is None:
                logfire.warn(
                    "Reminder for unknown invitation",
                    invitation_id=request.invitation_id,
                )
                return SendReminderResponse(scheduled=False)

            reminder = await self.reminder_scheduler.send_reminder(invitation)
            return SendReminderResponse(
                scheduled=reminder is not None, reminder=reminder
            )


class SendRemindersRequest(BaseModel):
    """Bulk reminder request for one sender."""

    sender_id: str


class SendRemindersResponse(BaseModel):
    """Reminders scheduled by the bulk sweep."""

    reminders: list[InvitationReminder]


class SendRemindersUseCase(BaseUseCase):
    """Use case for reminding every pending recipient of a sender."""

    def __init__(self, reminder_scheduler: ReminderScheduler) -> None:
        self.reminder_scheduler = reminder_scheduler

    async def execute(self, request: SendRemindersRequest) -> SendRemindersResponse:
        reminders = await self.reminder_scheduler.send_reminders(
            UserId(request.sender_id)
        )
        return SendRemindersResponse(reminders=reminders)
