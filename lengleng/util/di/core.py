"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from lengleng.config import (
    InvitationSettings,
    ReminderSettings,
    RewardSettings,
    Settings,
)
from lengleng.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_invitation_settings(self, settings: Settings) -> InvitationSettings:
        """Provide invitation settings."""
        return settings.invitations

    @provide(scope=Scope.APP)
    def provide_reward_settings(self, settings: Settings) -> RewardSettings:
        """Provide reward settings."""
        return settings.rewards

    @provide(scope=Scope.APP)
    def provide_reminder_settings(self, settings: Settings) -> ReminderSettings:
        """Provide reminder settings."""
        return settings.reminders
