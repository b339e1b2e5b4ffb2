"""In-memory quota ledger repository for testing."""

import asyncio
from typing import Optional

from lengleng.adapter.clock import SystemClock
from lengleng.domain.error import NotFoundError
from lengleng.domain.model.ledger import QuotaLedger
from lengleng.domain.repository.ledger import QuotaLedgerRepository
from lengleng.domain.service.clock import Clock
from lengleng.domain.value import LedgerField, UserId


class InMemoryQuotaLedgerRepository(QuotaLedgerRepository):
    """In-memory implementation of QuotaLedgerRepository for testing.

    Mutations run under one lock, standing in for the row lock Postgres
    takes on UPDATE.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._ledgers: dict[UserId, QuotaLedger] = {}
        self._lock = asyncio.Lock()

    async def find_by_user(self, user_id: UserId) -> Optional[QuotaLedger]:
        """Find a ledger by its owner."""
        return self._ledgers.get(user_id)

    async def get_or_create(
        self, user_id: UserId, available_invites: int
    ) -> QuotaLedger:
        """Return the user's ledger, creating it if absent."""
        async with self._lock:
            ledger = self._ledgers.get(user_id)
            if ledger is None:
                ledger = QuotaLedger(
                    user_id=user_id,
                    available_invites=available_invites,
                    created_at=self._clock.now(),
                )
                self._ledgers[user_id] = ledger
            return ledger

    async def try_decrement(
        self, user_id: UserId, field: LedgerField, amount: int
    ) -> bool:
        """Decrement a counter only if the result stays non-negative."""
        async with self._lock:
            ledger = self._ledgers.get(user_id)
            if ledger is None:
                return False
            current = getattr(ledger, field.value)
            if current < amount:
                return False
            self._ledgers[user_id] = ledger.model_copy(
                update={field.value: current - amount, "version": ledger.version + 1}
            )
            return True

    async def increment(self, user_id: UserId, field: LedgerField, amount: int) -> None:
        """Increment a counter.

        Raises:
            NotFoundError: If the user has no ledger
        """
        async with self._lock:
            ledger = self._ledgers.get(user_id)
            if ledger is None:
                raise NotFoundError("QuotaLedger", user_id)
            self._ledgers[user_id] = ledger.model_copy(
                update={
                    field.value: getattr(ledger, field.value) + amount,
                    "version": ledger.version + 1,
                }
            )

    async def save_if_version(self, ledger: QuotaLedger, expected_version: int) -> bool:
        """Replace a ledger if its stored version still matches."""
        async with self._lock:
            stored = self._ledgers.get(ledger.user_id)
            if stored is None or stored.version != expected_version:
                return False
            self._ledgers[ledger.user_id] = ledger
            return True
