"""Reward calculator.

Pure mapping from user behaviour to invite quota deltas.
"""

from lengleng.config import RewardSettings

from .base import Service


class RewardCalculator(Service):
    """Computes how many invites a reward event is worth."""

    def __init__(self, reward_settings: RewardSettings) -> None:
        self.reward_settings = reward_settings

    def streak_award(self, days: int) -> int:
        """Invites earned by a streak of ``days`` consecutive active days.

        Only full windows count: with the default 2 invites per 3 days,
        6 days earn 4 and 2 days earn nothing.

        Raises:
            ValueError: If days is negative
        """
        if days < 0:
            raise ValueError(f"Streak length must be non-negative, got {days}")
        windows = days // self.reward_settings.streak_window_days
        return windows * self.reward_settings.streak_award_per_window

    def premium_award(self) -> int:
        """Invites credited when premium is newly activated."""
        return self.reward_settings.premium_award

    def install_award(self) -> int:
        """Invites credited to the sender when an invitation converts."""
        return self.reward_settings.install_award
