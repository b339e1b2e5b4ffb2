"""Quota ledger domain service."""

from datetime import timedelta

import logfire

from lengleng.config import InvitationSettings
from lengleng.domain.error import ConcurrentModificationError
from lengleng.domain.model.ledger import QuotaLedger
from lengleng.domain.repository import QuotaLedgerRepository
from lengleng.domain.value import LedgerField, UserId
from lengleng.util.deadline import bounded

from .base import Service
from .clock import Clock
from .reward_calculator import RewardCalculator


class QuotaLedgerService(Service):
    """Domain service owning the per-user invite quota.

    Counter updates go through the repository's atomic primitives.
    Award operations that need to read-then-write (streak, premium) use a
    compare-and-swap on the ledger version.
    """

    def __init__(
        self,
        ledger_repository: QuotaLedgerRepository,
        reward_calculator: RewardCalculator,
        invitation_settings: InvitationSettings,
        clock: Clock,
    ) -> None:
        """Initialize quota ledger service.

        Args:
            ledger_repository: Quota ledger repository
            reward_calculator: Reward calculator
            invitation_settings: Invitation settings (default quota, timeouts)
            clock: Time source
        """
        self.ledger_repository = ledger_repository
        self.reward_calculator = reward_calculator
        self.settings = invitation_settings
        self.clock = clock

    @property
    def _timeout(self) -> float:
        return self.settings.store_timeout_seconds

    async def get_ledger(self, user_id: UserId) -> QuotaLedger:
        """Get a user's ledger, creating it with the default quota if missing.

        Args:
            user_id: Ledger owner

        Returns:
            The user's ledger
        """
        return await bounded(
            self.ledger_repository.get_or_create(
                user_id, self.settings.default_available_invites
            ),
            self._timeout,
        )

    async def try_send_decrement(self, user_id: UserId) -> bool:
        """Reserve one invite for a send.

        This is the single synchronization point against oversending:
        concurrent callers never both succeed on the last invite.

        Args:
            user_id: Sender

        Returns:
            True if one invite was reserved, False (no mutation) if none left
        """
        with logfire.span("quota_ledger.try_send_decrement", user_id=user_id):
            await self.get_ledger(user_id)
            reserved = await bounded(
                self.ledger_repository.try_decrement(
                    user_id, LedgerField.AVAILABLE_INVITES, 1
                ),
                self._timeout,
            )
            if not reserved:
                logfire.warn("Invite quota exhausted", user_id=user_id)
            return reserved

    async def credit_invites(self, user_id: UserId, amount: int) -> None:
        """Credit invites to a user. Never decrements.

        Args:
            user_id: User to credit
            amount: Number of invites to add

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Credit amount must be non-negative, got {amount}")
        if amount == 0:
            return
        with logfire.span(
            "quota_ledger.credit_invites", user_id=user_id, amount=amount
        ):
            await self.get_ledger(user_id)
            await bounded(
                self.ledger_repository.increment(
                    user_id, LedgerField.AVAILABLE_INVITES, amount
                ),
                self._timeout,
            )
            logfire.info("Invites credited", user_id=user_id, amount=amount)

    async def record_invite_sent(self, user_id: UserId) -> None:
        """Count a successfully delivered invitation."""
        await self.get_ledger(user_id)
        await bounded(
            self.ledger_repository.increment(
                user_id, LedgerField.TOTAL_INVITES_SENT, 1
            ),
            self._timeout,
        )

    async def credit_install(self, user_id: UserId, reward: int) -> None:
        """Count an accepted invitation and credit its install award.

        Both counters move in one compare-and-swap, so a failed call leaves
        the ledger untouched and can be retried as a whole.

        Args:
            user_id: Sender of the converted invitation
            reward: Invites to credit

        Raises:
            ValueError: If reward is negative
            ConcurrentModificationError: If the ledger keeps changing underneath
        """
        if reward < 0:
            raise ValueError(f"Credit amount must be non-negative, got {reward}")
        with logfire.span(
            "quota_ledger.credit_install", user_id=user_id, reward=reward
        ):
            for _ in range(self.settings.max_conflict_retries):
                ledger = await self.get_ledger(user_id)
                updated = ledger.model_copy(
                    update={
                        "total_invites_accepted": ledger.total_invites_accepted + 1,
                        "available_invites": ledger.available_invites + reward,
                        "version": ledger.version + 1,
                    }
                )
                saved = await bounded(
                    self.ledger_repository.save_if_version(updated, ledger.version),
                    self._timeout,
                )
                if saved:
                    logfire.info("Install award credited", user_id=user_id, reward=reward)
                    return

            raise ConcurrentModificationError(
                "QuotaLedger", user_id, self.settings.max_conflict_retries
            )

    async def award_streak(self, user_id: UserId, days: int) -> int:
        """Credit the streak reward for a user's current activity streak.

        A streak run is taken to have started ``days`` days ago. If the last
        streak award falls inside that run, only the part of the award not
        yet credited is added (e.g. 3 days earned 2, reaching 6 days adds 2
        more). The credit, ``invite_streak`` and ``last_invite_award`` are
        written in one compare-and-swap so a window is never paid twice.

        Args:
            user_id: User whose streak is rewarded
            days: Current streak length in days (computed elsewhere)

        Returns:
            Number of invites credited (0 if nothing new was earned)

        Raises:
            ValueError: If days is negative
            ConcurrentModificationError: If the ledger keeps changing underneath
        """
        full_award = self.reward_calculator.streak_award(days)
        with logfire.span("quota_ledger.award_streak", user_id=user_id, days=days):
            for _ in range(self.settings.max_conflict_retries):
                ledger = await self.get_ledger(user_id)
                now = self.clock.now()
                streak_started_at = now - timedelta(days=days)

                same_run = (
                    ledger.last_invite_award is not None
                    and ledger.last_invite_award >= streak_started_at
                )
                already_awarded = (
                    self.reward_calculator.streak_award(ledger.invite_streak)
                    if same_run
                    else 0
                )
                award = max(0, full_award - already_awarded)
                if award == 0:
                    logfire.info(
                        "No new streak award",
                        user_id=user_id,
                        days=days,
                        same_run=same_run,
                    )
                    return 0

                updated = ledger.model_copy(
                    update={
                        "available_invites": ledger.available_invites + award,
                        "invite_streak": days,
                        "last_invite_award": now,
                        "version": ledger.version + 1,
                    }
                )
                saved = await bounded(
                    self.ledger_repository.save_if_version(updated, ledger.version),
                    self._timeout,
                )
                if saved:
                    logfire.info(
                        "Streak award credited",
                        user_id=user_id,
                        days=days,
                        award=award,
                    )
                    return award

            raise ConcurrentModificationError(
                "QuotaLedger", user_id, self.settings.max_conflict_retries
            )

    async def confirm_premium(self, user_id: UserId, is_premium: bool) -> int:
        """Record the user's premium status, awarding on activation.

        The premium award is credited only on an inactive -> active
        transition; repeated confirmations of an active subscription are
        no-ops. A lapse is recorded so the next activation pays again.

        Args:
            user_id: User whose status was confirmed
            is_premium: Current premium status from the identity provider

        Returns:
            Number of invites credited
        """
        with logfire.span(
            "quota_ledger.confirm_premium", user_id=user_id, is_premium=is_premium
        ):
            for _ in range(self.settings.max_conflict_retries):
                ledger = await self.get_ledger(user_id)
                if ledger.premium_active == is_premium:
                    return 0

                award = self.reward_calculator.premium_award() if is_premium else 0
                updated = ledger.model_copy(
                    update={
                        "premium_active": is_premium,
                        "available_invites": ledger.available_invites + award,
                        "version": ledger.version + 1,
                    }
                )
                saved = await bounded(
                    self.ledger_repository.save_if_version(updated, ledger.version),
                    self._timeout,
                )
                if saved:
                    logfire.info(
                        "Premium status changed",
                        user_id=user_id,
                        is_premium=is_premium,
                        award=award,
                    )
                    return award

            raise ConcurrentModificationError(
                "QuotaLedger", user_id, self.settings.max_conflict_retries
            )
