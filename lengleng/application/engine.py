"""Invitation engine facade.

The public entry point the rest of the product calls. Each operation is
one use case; the engine only adapts plain arguments to request models.
Build it from the DI container rather than sharing a global instance:

    container = create_container(identity_provider=my_provider)
    async with container() as request:
        engine = await request.get(InvitationEngine)
        invitation = await engine.send_invite(user_id, contact)
"""

from datetime import datetime

from lengleng.application.usecase.invitation import (
    ExpireInvitationRequest,
    ExpireInvitationUseCase,
    GetInvitationsRequest,
    GetInvitationsResponse,
    GetInvitationsUseCase,
    SendInviteRequest,
    SendInviteUseCase,
    SendReminderRequest,
    SendReminderUseCase,
    SendRemindersRequest,
    SendRemindersUseCase,
    SweepExpiredRequest,
    SweepExpiredUseCase,
    TrackInvitationClickUseCase,
    TrackInvitationInstallUseCase,
    TrackInvitationRequest,
    TrackInvitationResponse,
)
from lengleng.application.usecase.reward import (
    AwardStreakRequest,
    AwardStreakUseCase,
    ConfirmPremiumRequest,
    ConfirmPremiumUseCase,
    GetQuotaRequest,
    GetQuotaUseCase,
)
from lengleng.domain.model import Invitation, InvitationReminder, QuotaLedger
from lengleng.domain.value import Contact, InvitationStatus


class InvitationEngine:
    """Invitation & referral lifecycle engine."""

    def __init__(
        self,
        send_invite: SendInviteUseCase,
        track_click: TrackInvitationClickUseCase,
        track_install: TrackInvitationInstallUseCase,
        expire_invitation: ExpireInvitationUseCase,
        sweep_expired: SweepExpiredUseCase,
        send_reminder: SendReminderUseCase,
        send_reminders: SendRemindersUseCase,
        get_invitations: GetInvitationsUseCase,
        award_streak: AwardStreakUseCase,
        confirm_premium: ConfirmPremiumUseCase,
        get_quota: GetQuotaUseCase,
    ) -> None:
        self._send_invite = send_invite
        self._track_click = track_click
        self._track_install = track_install
        self._expire_invitation = expire_invitation
        self._sweep_expired = sweep_expired
        self._send_reminder = send_reminder
        self._send_reminders = send_reminders
        self._get_invitations = get_invitations
        self._award_streak = award_streak
        self._confirm_premium = confirm_premium
        self._get_quota = get_quota

    async def send_invite(
        self,
        sender_id: str,
        contact: Contact,
        message: str | None = None,
        deadline: datetime | None = None,
    ) -> Invitation:
        """Send an invitation, spending one invite of quota.

        Raises:
            InvalidContactError: If the phone number is empty or malformed
            NoInvitesRemainingError: If the sender's quota is exhausted
            SendFailedError: If persisting or delivering failed (quota restored)
        """
        response = await self._send_invite.execute(
            SendInviteRequest(
                sender_id=sender_id,
                contact=contact,
                message=message,
                deadline=deadline,
            )
        )
        return response.invitation

    async def track_invitation_click(self, invitation_id: str) -> Invitation | None:
        """Record a click. Returns None for unknown invitations."""
        response = await self._track_click.execute(
            TrackInvitationRequest(invitation_id=invitation_id)
        )
        return response.invitation

    async def track_invitation_install(
        self, invitation_id: str
    ) -> TrackInvitationResponse:
        """Record an install; the response carries the credited reward."""
        return await self._track_install.execute(
            TrackInvitationRequest(invitation_id=invitation_id)
        )

    async def expire(self, invitation_id: str) -> Invitation | None:
        """Apply the expiry check to one invitation."""
        response = await self._expire_invitation.execute(
            ExpireInvitationRequest(invitation_id=invitation_id)
        )
        return response.invitation

    async def sweep_expired(self, sender_id: str) -> list[Invitation]:
        """Apply the expiry check to all of a sender's active invitations."""
        response = await self._sweep_expired.execute(
            SweepExpiredRequest(sender_id=sender_id)
        )
        return response.expired

    async def send_reminder(self, invitation_id: str) -> InvitationReminder | None:
        """Schedule a reminder; None if the invitation was skipped."""
        response = await self._send_reminder.execute(
            SendReminderRequest(invitation_id=invitation_id)
        )
        return response.reminder

    async def send_reminders(self, sender_id: str) -> list[InvitationReminder]:
        """Schedule reminders for all of a sender's pending invitations."""
        response = await self._send_reminders.execute(
            SendRemindersRequest(sender_id=sender_id)
        )
        return response.reminders

    async def list_invitations(
        self,
        sender_id: str,
        status: InvitationStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> GetInvitationsResponse:
        """Invite history, newest first, with the sender's stats."""
        return await self._get_invitations.execute(
            GetInvitationsRequest(
                sender_id=sender_id, status=status, limit=limit, offset=offset
            )
        )

    async def award_streak(self, user_id: str, days: int) -> int:
        """Credit the streak reward; returns the invites credited now."""
        response = await self._award_streak.execute(
            AwardStreakRequest(user_id=user_id, days=days)
        )
        return response.awarded

    async def confirm_premium(self, user_id: str) -> int:
        """Sync premium status; returns the invites credited now."""
        response = await self._confirm_premium.execute(
            ConfirmPremiumRequest(user_id=user_id)
        )
        return response.awarded

    async def get_quota(self, user_id: str) -> QuotaLedger:
        """The user's ledger, created with the default quota if new."""
        response = await self._get_quota.execute(GetQuotaRequest(user_id=user_id))
        return response.ledger
