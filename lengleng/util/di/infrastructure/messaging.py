"""Messaging infrastructure providers."""

from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lengleng.adapter.notifier import OutboxNotifier
from lengleng.domain.service import Clock, Notifier
from lengleng.util.di.base import ProviderBase


class MessagingProvider(ProviderBase):
    """Messaging component base."""

    __mock_component__ = "messaging"
    __depends_on__ = {"persistence"}


class ProdMessagingProvider(MessagingProvider):
    """Production messaging provider writing to the notification outbox."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_notifier(
        self, session_factory: async_sessionmaker[AsyncSession], clock: Clock
    ) -> Notifier:
        """Provide outbox notifier."""
        return OutboxNotifier(session_factory=session_factory, clock=clock)
