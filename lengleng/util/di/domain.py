"""Domain layer DI providers."""

from dishka import Scope, provide

from lengleng.config import InvitationSettings, ReminderSettings, RewardSettings
from lengleng.domain.repository import InvitationRepository, QuotaLedgerRepository
from lengleng.domain.service import (
    Clock,
    InvitationService,
    MessageComposer,
    Notifier,
    QuotaLedgerService,
    ReminderScheduler,
    RewardCalculator,
)
from lengleng.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with the repository lifecycle.
    """

    scope = Scope.REQUEST

    @provide
    def get_reward_calculator(self, reward_settings: RewardSettings) -> RewardCalculator:
        """Provide reward calculator."""
        return RewardCalculator(reward_settings=reward_settings)

    @provide
    def get_message_composer(
        self, invitation_settings: InvitationSettings
    ) -> MessageComposer:
        """Provide invite message composer."""
        return MessageComposer(
            invite_link_base_url=invitation_settings.invite_link_base_url
        )

    @provide
    def get_quota_ledger_service(
        self,
        ledger_repository: QuotaLedgerRepository,
        reward_calculator: RewardCalculator,
        invitation_settings: InvitationSettings,
        clock: Clock,
    ) -> QuotaLedgerService:
        """Provide quota ledger domain service."""
        return QuotaLedgerService(
            ledger_repository=ledger_repository,
            reward_calculator=reward_calculator,
            invitation_settings=invitation_settings,
            clock=clock,
        )

    @provide
    def get_invitation_service(
        self,
        invitation_repository: InvitationRepository,
        ledger_service: QuotaLedgerService,
        reward_calculator: RewardCalculator,
        message_composer: MessageComposer,
        notifier: Notifier,
        clock: Clock,
        invitation_settings: InvitationSettings,
    ) -> InvitationService:
        """Provide invitation lifecycle domain service."""
        return InvitationService(
            invitation_repository=invitation_repository,
            ledger_service=ledger_service,
            reward_calculator=reward_calculator,
            message_composer=message_composer,
            notifier=notifier,
            clock=clock,
            invitation_settings=invitation_settings,
        )

    @provide
    def get_reminder_scheduler(
        self,
        invitation_service: InvitationService,
        message_composer: MessageComposer,
        notifier: Notifier,
        clock: Clock,
        reminder_settings: ReminderSettings,
        invitation_settings: InvitationSettings,
    ) -> ReminderScheduler:
        """Provide reminder scheduler."""
        return ReminderScheduler(
            invitation_service=invitation_service,
            message_composer=message_composer,
            notifier=notifier,
            clock=clock,
            reminder_settings=reminder_settings,
            invitation_settings=invitation_settings,
        )
