"""Notification delivery interface."""

from datetime import timedelta

from lengleng.domain.model.notification import Notification


class Notifier:
    """Delivery transport the engine hands messages to.

    The engine decides when and whether to notify; implementations own the
    transport (SMS, push, outbox table...).
    """

    async def deliver(self, recipient_phone: str, message: str) -> bool:
        """Deliver an invite message now.

        Args:
            recipient_phone: Recipient phone number
            message: Full message body including the invite link

        Returns:
            True if the transport accepted the message
        """
        raise NotImplementedError

    async def schedule(self, notification: Notification, delay: timedelta) -> None:
        """Schedule a notification for later delivery.

        Args:
            notification: Notification to deliver
            delay: Time from now until delivery
        """
        raise NotImplementedError
