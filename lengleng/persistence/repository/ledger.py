"""PostgreSQL implementation of QuotaLedger repository."""

from typing import Optional

from sqlalchemy import and_, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lengleng.domain.error import NotFoundError
from lengleng.domain.model import QuotaLedger
from lengleng.domain.repository import QuotaLedgerRepository
from lengleng.domain.value import LedgerField, UserId
from lengleng.persistence.mappers import ledger_to_dict, row_to_ledger
from lengleng.persistence.tables import quota_ledgers_table


class PostgresQuotaLedgerRepository(QuotaLedgerRepository):
    """PostgreSQL implementation of QuotaLedgerRepository.

    Counter changes are single UPDATE statements, so the row lock taken
    by Postgres serializes concurrent callers for one user.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def find_by_user(self, user_id: UserId) -> Optional[QuotaLedger]:
        """Find a ledger by its owner."""
        stmt = select(quota_ledgers_table).where(
            quota_ledgers_table.c.user_id == user_id
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_ledger(dict(row)) if row else None

    async def get_or_create(
        self, user_id: UserId, available_invites: int
    ) -> QuotaLedger:
        """Return the user's ledger, inserting a fresh one if absent.

        Args:
            user_id: Ledger owner
            available_invites: Starting quota for a new ledger

        Returns:
            The stored ledger
        """
        stmt = (
            insert(quota_ledgers_table)
            .values(user_id=user_id, available_invites=available_invites)
            .on_conflict_do_nothing(index_elements=[quota_ledgers_table.c.user_id])
        )
        async with self.session_factory.begin() as session:
            await session.execute(stmt)
            result = await session.execute(
                select(quota_ledgers_table).where(
                    quota_ledgers_table.c.user_id == user_id
                )
            )
            row = result.mappings().one()
        return row_to_ledger(dict(row))

    async def try_decrement(
        self, user_id: UserId, field: LedgerField, amount: int
    ) -> bool:
        """Decrement a counter only if the result stays non-negative.

        Args:
            user_id: Ledger owner
            field: Counter to decrement
            amount: Amount to subtract

        Returns:
            True if the row was updated, False if the counter was too low
        """
        column = quota_ledgers_table.c[field.value]
        stmt = (
            update(quota_ledgers_table)
            .where(
                and_(
                    quota_ledgers_table.c.user_id == user_id,
                    column >= amount,
                )
            )
            .values(
                {
                    column: column - amount,
                    quota_ledgers_table.c.version: quota_ledgers_table.c.version + 1,
                }
            )
            .returning(quota_ledgers_table.c.user_id)
        )
        async with self.session_factory.begin() as session:
            result = await session.execute(stmt)
            return result.first() is not None

    async def increment(self, user_id: UserId, field: LedgerField, amount: int) -> None:
        """Increment a counter.

        Args:
            user_id: Ledger owner
            field: Counter to increment
            amount: Amount to add

        Raises:
            NotFoundError: If the user has no ledger
        """
        column = quota_ledgers_table.c[field.value]
        stmt = (
            update(quota_ledgers_table)
            .where(quota_ledgers_table.c.user_id == user_id)
            .values(
                {
                    column: column + amount,
                    quota_ledgers_table.c.version: quota_ledgers_table.c.version + 1,
                }
            )
            .returning(quota_ledgers_table.c.user_id)
        )
        async with self.session_factory.begin() as session:
            result = await session.execute(stmt)
            if result.first() is None:
                raise NotFoundError("QuotaLedger", user_id)

    async def save_if_version(self, ledger: QuotaLedger, expected_version: int) -> bool:
        """Replace a ledger if its stored version still matches."""
        values = ledger_to_dict(ledger)
        del values["user_id"]
        del values["created_at"]
        stmt = (
            update(quota_ledgers_table)
            .where(
                and_(
                    quota_ledgers_table.c.user_id == ledger.user_id,
                    quota_ledgers_table.c.version == expected_version,
                )
            )
            .values(**values)
            .returning(quota_ledgers_table.c.user_id)
        )
        async with self.session_factory.begin() as session:
            result = await session.execute(stmt)
            return result.first() is not None
