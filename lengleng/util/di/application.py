"""Application layer DI providers."""

from dishka import Scope, provide

from lengleng.application.engine import InvitationEngine
from lengleng.application.usecase.invitation import (
    ExpireInvitationUseCase,
    GetInvitationsUseCase,
    SendInviteUseCase,
    SendReminderUseCase,
    SendRemindersUseCase,
    SweepExpiredUseCase,
    TrackInvitationClickUseCase,
    TrackInvitationInstallUseCase,
)
from lengleng.application.usecase.reward import (
    AwardStreakUseCase,
    ConfirmPremiumUseCase,
    GetQuotaUseCase,
)
from lengleng.config import InvitationSettings
from lengleng.domain.service import (
    IdentityProvider,
    InvitationService,
    MessageComposer,
    QuotaLedgerService,
    ReminderScheduler,
)
from lengleng.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Invitation use cases
    @provide(scope=Scope.REQUEST)
    def get_send_invite_use_case(
        self,
        invitation_service: InvitationService,
        ledger_service: QuotaLedgerService,
        reminder_scheduler: ReminderScheduler,
        message_composer: MessageComposer,
        settings: InvitationSettings,
    ) -> SendInviteUseCase:
        """Provide send invite use case."""
        return SendInviteUseCase(
            invitation_service=invitation_service,
            ledger_service=ledger_service,
            reminder_scheduler=reminder_scheduler,
            message_composer=message_composer,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_track_click_use_case(
        self, invitation_service: InvitationService
    ) -> TrackInvitationClickUseCase:
        """Provide track click use case."""
        return TrackInvitationClickUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_track_install_use_case(
        self, invitation_service: InvitationService
    ) -> TrackInvitationInstallUseCase:
        """Provide track install use case."""
        return TrackInvitationInstallUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_expire_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> ExpireInvitationUseCase:
        """Provide expire invitation use case."""
        return ExpireInvitationUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_sweep_expired_use_case(
        self, invitation_service: InvitationService
    ) -> SweepExpiredUseCase:
        """Provide sweep expired use case."""
        return SweepExpiredUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_send_reminder_use_case(
        self,
        invitation_service: InvitationService,
        reminder_scheduler: ReminderScheduler,
    ) -> SendReminderUseCase:
        """Provide send reminder use case."""
        return SendReminderUseCase(
            invitation_service=invitation_service,
            reminder_scheduler=reminder_scheduler,
        )

    @provide(scope=Scope.REQUEST)
    def get_send_reminders_use_case(
        self, reminder_scheduler: ReminderScheduler
    ) -> SendRemindersUseCase:
        """Provide bulk reminder use case."""
        return SendRemindersUseCase(reminder_scheduler=reminder_scheduler)

    @provide(scope=Scope.REQUEST)
    def get_get_invitations_use_case(
        self,
        invitation_service: InvitationService,
        ledger_service: QuotaLedgerService,
    ) -> GetInvitationsUseCase:
        """Provide invite history use case."""
        return GetInvitationsUseCase(
            invitation_service=invitation_service, ledger_service=ledger_service
        )

    # Reward use cases
    @provide(scope=Scope.REQUEST)
    def get_award_streak_use_case(
        self, ledger_service: QuotaLedgerService
    ) -> AwardStreakUseCase:
        """Provide award streak use case."""
        return AwardStreakUseCase(ledger_service=ledger_service)

    @provide(scope=Scope.REQUEST)
    def get_confirm_premium_use_case(
        self,
        identity_provider: IdentityProvider,
        ledger_service: QuotaLedgerService,
    ) -> ConfirmPremiumUseCase:
        """Provide confirm premium use case."""
        return ConfirmPremiumUseCase(
            identity_provider=identity_provider, ledger_service=ledger_service
        )

    @provide(scope=Scope.REQUEST)
    def get_get_quota_use_case(
        self, ledger_service: QuotaLedgerService
    ) -> GetQuotaUseCase:
        """Provide get quota use case."""
        return GetQuotaUseCase(ledger_service=ledger_service)

    # Facade
    @provide(scope=Scope.REQUEST)
    def get_invitation_engine(
        self,
        send_invite: SendInviteUseCase,
        track_click: TrackInvitationClickUseCase,
        track_install: TrackInvitationInstallUseCase,
        expire_invitation: ExpireInvitationUseCase,
        sweep_expired: SweepExpiredUseCase,
        send_reminder: SendReminderUseCase,
        send_reminders: SendRemindersUseCase,
        get_invitations: GetInvitationsUseCase,
        award_streak: AwardStreakUseCase,
        confirm_premium: ConfirmPremiumUseCase,
        get_quota: GetQuotaUseCase,
    ) -> InvitationEngine:
        """Provide the invitation engine facade."""
        return InvitationEngine(
            send_invite=send_invite,
            track_click=track_click,
            track_install=track_install,
            expire_invitation=expire_invitation,
            sweep_expired=sweep_expired,
            send_reminder=send_reminder,
            send_reminders=send_reminders,
            get_invitations=get_invitations,
            award_streak=award_streak,
            confirm_premium=confirm_premium,
            get_quota=get_quota,
        )
