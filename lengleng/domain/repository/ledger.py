"""Quota ledger repository interface."""

from abc import ABC, abstractmethod

from lengleng.domain.model.ledger import QuotaLedger
from lengleng.domain.value import LedgerField, UserId


class QuotaLedgerRepository(ABC):
    """Repository for QuotaLedger aggregate.

    All counter operations are atomic per user and bump the ledger version.
    """

    @abstractmethod
    async def find_by_user(self, user_id: UserId) -> QuotaLedger | None:
        """Find the ledger of a user.

        Args:
            user_id: Owner of the ledger

        Returns:
            The ledger if it exists, None otherwise
        """
        pass

    @abstractmethod
    async def get_or_create(
        self, user_id: UserId, available_invites: int
    ) -> QuotaLedger:
        """Return the user's ledger, creating it if missing.

        Creation is insert-if-absent: concurrent callers end up with the
        same ledger.

        Args:
            user_id: Owner of the ledger
            available_invites: Starting quota for a new ledger

        Returns:
            The existing or newly created ledger
        """
        pass

    @abstractmethod
    async def try_decrement(
        self, user_id: UserId, field: LedgerField, amount: int
    ) -> bool:
        """Atomically decrement a counter if it stays non-negative.

        Args:
            user_id: Owner of the ledger
            field: Counter to decrement
            amount: Positive amount to subtract

        Returns:
            True if decremented, False (no mutation) if insufficient
        """
        pass

    @abstractmethod
    async def increment(self, user_id: UserId, field: LedgerField, amount: int) -> None:
        """Atomically increment a counter.

        Args:
            user_id: Owner of the ledger
            field: Counter to increment
            amount: Non-negative amount to add

        Raises:
            NotFoundError: If the user has no ledger
        """
        pass

    @abstractmethod
    async def save_if_version(self, ledger: QuotaLedger, expected_version: int) -> bool:
        """Replace a ledger if nobody changed it in between.

        Args:
            ledger: The new state (its version already bumped)
            expected_version: Version the caller read before mutating

        Returns:
            True if the write happened, False on a version conflict
        """
        pass
