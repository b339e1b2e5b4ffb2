"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from lengleng.config import Settings
from lengleng.domain.repository import InvitationRepository, QuotaLedgerRepository
from lengleng.persistence.database import create_engine, create_session_factory
from lengleng.persistence.repository import (
    PostgresInvitationRepository,
    PostgresQuotaLedgerRepository,
)
from lengleng.util.di.base import ProviderBase
from lengleng.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the container closes."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()
        logfire.info("Database engine disposed")

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    def get_invitation_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> InvitationRepository:
        """Provide Invitation repository."""
        return PostgresInvitationRepository(session_factory)

    @provide(scope=Scope.REQUEST)
    def get_ledger_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> QuotaLedgerRepository:
        """Provide QuotaLedger repository."""
        return PostgresQuotaLedgerRepository(session_factory)
