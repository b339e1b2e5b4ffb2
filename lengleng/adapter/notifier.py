"""Notifier implementations."""

from datetime import timedelta
from uuid import uuid4

import logfire
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lengleng.adapter.error import DeliveryError
from lengleng.domain.model.notification import InvitationMessage, Notification
from lengleng.domain.service.clock import Clock
from lengleng.domain.service.notifier import Notifier
from lengleng.persistence.mappers import notification_to_outbox_row
from lengleng.persistence.tables import notification_outbox_table


class OutboxNotifier(Notifier):
    """Notifier writing into the notification outbox table.

    The SMS/push transport drains the outbox; a row becomes due at its
    ``deliver_after`` time. Accepting a message means it was committed.
    """

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], clock: Clock
    ) -> None:
        """Initialize outbox notifier.

        Args:
            session_factory: Factory for database sessions
            clock: Time source for due times
        """
        self.session_factory = session_factory
        self.clock = clock

    async def deliver(self, recipient_phone: str, message: str) -> bool:
        """Queue an invite message for immediate delivery."""
        notification = InvitationMessage(recipient_phone=recipient_phone, body=message)
        await self._enqueue(notification, timedelta(0))
        return True

    async def schedule(self, notification: Notification, delay: timedelta) -> None:
        """Queue a notification for delivery after ``delay``."""
        await self._enqueue(notification, delay)

    async def _enqueue(self, notification: Notification, delay: timedelta) -> None:
        row = notification_to_outbox_row(
            uuid4(), notification, self.clock.now() + delay
        )
        try:
            async with self.session_factory.begin() as session:
                await session.execute(insert(notification_outbox_table).values(**row))
        except Exception as e:
            raise DeliveryError(f"Could not enqueue {notification.kind}: {e}") from e
        logfire.info(
            "Notification enqueued",
            kind=notification.kind,
            deliver_after=row["deliver_after"],
        )


class RecordingNotifier(Notifier):
    """Notifier that records everything it is asked to send. For tests.

    Set ``fail_deliveries`` to make ``deliver`` report failure, or
    ``raise_on_deliver`` / ``raise_on_schedule`` to make it raise.
    """

    def __init__(self) -> None:
        self.delivered: list[InvitationMessage] = []
        self.scheduled: list[tuple[Notification, timedelta]] = []
        self.fail_deliveries = False
        self.raise_on_deliver: Exception | None = None
        self.raise_on_schedule: Exception | None = None

    async def deliver(self, recipient_phone: str, message: str) -> bool:
        if self.raise_on_deliver is not None:
            raise self.raise_on_deliver
        if self.fail_deliveries:
            return False
        self.delivered.append(
            InvitationMessage(recipient_phone=recipient_phone, body=message)
        )
        return True

    async def schedule(self, notification: Notification, delay: timedelta) -> None:
        if self.raise_on_schedule is not None:
            raise self.raise_on_schedule
        self.scheduled.append((notification, delay))
