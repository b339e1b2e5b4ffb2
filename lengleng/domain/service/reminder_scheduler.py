"""Reminder scheduling domain service."""

from datetime import timedelta

import logfire

from lengleng.config import InvitationSettings, ReminderSettings
from lengleng.domain.model.invitation import Invitation
from lengleng.domain.model.notification import InvitationReminder, InviteExpiringNudge
from lengleng.domain.value import UserId
from lengleng.util.deadline import bounded

from .base import Service
from .clock import Clock
from .invitation_service import InvitationService
from .message_composer import MessageComposer
from .notifier import Notifier


class ReminderScheduler(Service):
    """Decides whether and when reminders fire.

    Delivery belongs to the notifier; scheduling failures are logged and
    never surface as engine errors.
    """

    def __init__(
        self,
        invitation_service: InvitationService,
        message_composer: MessageComposer,
        notifier: Notifier,
        clock: Clock,
        reminder_settings: ReminderSettings,
        invitation_settings: InvitationSettings,
    ) -> None:
        """Initialize reminder scheduler.

        Args:
            invitation_service: Invitation lifecycle service
            message_composer: Builds reminder bodies with the invite link
            notifier: Delivery transport
            clock: Time source
            reminder_settings: Reminder settings
            invitation_settings: Invitation settings (timeouts)
        """
        self.invitation_service = invitation_service
        self.message_composer = message_composer
        self.notifier = notifier
        self.clock = clock
        self.settings = reminder_settings
        self.invitation_settings = invitation_settings

    def reminder_delay(self, invitation: Invitation) -> timedelta:
        """Delay until a reminder scheduled now should fire.

        A fixed fraction (default 80%) of the time remaining to expiry.
        """
        return invitation.time_remaining(self.clock.now()) * self.settings.delay_ratio

    async def send_reminder(self, invitation: Invitation) -> InvitationReminder | None:
        """Count and schedule a reminder for a pending invitation.

        Installed or expired invitations are skipped silently, as are
        invitations that reached ``max_reminders`` when a cap is configured.

        Args:
            invitation: Invitation to remind about (re-read before changing)

        Returns:
            The scheduled reminder, or None if the invitation was skipped
        """
        with logfire.span(
            "reminder_scheduler.send_reminder", invitation_id=str(invitation.id)
        ):
            now = self.clock.now()
            max_reminders = self.settings.max_reminders

            def remind(current: Invitation) -> Invitation | None:
                if not current.is_active or now >= current.expires_at:
                    return None
                tracking = current.tracking_data
                if max_reminders is not None and tracking.reminder_count >= max_reminders:
                    return None
                return current.model_copy(
                    update={
                        "tracking_data": tracking.model_copy(
                            update={
                                "reminder_count": tracking.reminder_count + 1,
                                "last_reminder_sent": now,
                            }
                        ),
                        "version": current.version + 1,
                    }
                )

            result = await self.invitation_service.apply_transition(
                invitation.id, remind
            )
            current = result.invitation
            if current is None or not result.changed:
                logfire.info(
                    "Reminder skipped",
                    invitation_id=str(invitation.id),
                    status=current.status.value if current else None,
                )
                return None

            delay = self.reminder_delay(current)
            reminder = InvitationReminder(
                invitation_id=current.id,
                recipient_phone=current.recipient_phone,
                body=self.message_composer.with_link(
                    self.settings.reminder_message, current.id
                ),
                fire_at=now + delay,
            )
            await self._schedule(reminder, delay)
            logfire.info(
                "Reminder scheduled",
                invitation_id=str(current.id),
                reminder_count=current.tracking_data.reminder_count,
                delay_seconds=delay.total_seconds(),
            )
            return reminder

    async def send_reminders(self, sender_id: UserId) -> list[InvitationReminder]:
        """Schedule a reminder for every pending invitation of a sender.

        Args:
            sender_id: Sender whose invitations are swept

        Returns:
            Reminders that were scheduled
        """
        with logfire.span("reminder_scheduler.send_reminders", sender_id=sender_id):
            reminders: list[InvitationReminder] = []
            # send_reminder re-reads each one, which applies the expiry check
            for invitation in await self.invitation_service.active_invitations(
                sender_id
            ):
                reminder = await self.send_reminder(invitation)
                if reminder is not None:
                    reminders.append(reminder)
            logfire.info(
                "Reminder sweep finished",
                sender_id=sender_id,
                reminded=len(reminders),
            )
            return reminders

    async def schedule_expiry_nudge(
        self, invitation: Invitation
    ) -> InviteExpiringNudge | None:
        """Schedule the sender-facing "invites expiring soon" push.

        Args:
            invitation: Freshly sent invitation

        Returns:
            The scheduled nudge, or None if the invitation is no longer active
        """
        now = self.clock.now()
        if not invitation.is_active or now >= invitation.expires_at:
            return None

        delay = self.reminder_delay(invitation)
        nudge = InviteExpiringNudge(
            sender_id=invitation.sender_id,
            invitation_id=invitation.id,
            title=self.settings.expiring_title,
            body=self.settings.expiring_body,
            fire_at=now + delay,
        )
        await self._schedule(nudge, delay)
        return nudge

    async def _schedule(
        self, notification: InvitationReminder | InviteExpiringNudge, delay: timedelta
    ) -> None:
        try:
            await bounded(
                self.notifier.schedule(notification, delay),
                self.invitation_settings.store_timeout_seconds,
            )
        except Exception as e:
            logfire.error(
                "Scheduling notification failed",
                kind=notification.kind,
                invitation_id=str(notification.invitation_id),
                error=repr(e),
            )
