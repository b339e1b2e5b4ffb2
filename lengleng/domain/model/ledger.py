"""Quota ledger aggregate.

One ledger per user holds the scarce invite quota together with the
cumulative invitation stats.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from lengleng.domain.model.common import DomainModel
from lengleng.domain.value import UserId


class QuotaLedger(DomainModel):
    """Per-user invite quota and counters.

    available_invites is decremented once per successful send and only
    grows through reward credits. The totals never decrease.
    """

    user_id: UserId
    available_invites: int = Field(default=10, ge=0)
    total_invites_sent: int = Field(default=0, ge=0)
    total_invites_accepted: int = Field(default=0, ge=0)
    invite_streak: int = Field(default=0, ge=0)  # Streak length at last award
    last_invite_award: Optional[datetime] = None
    premium_active: bool = False
    version: int = Field(default=0, ge=0)
    created_at: datetime

    @property
    def acceptance_rate(self) -> float:
        """Share of sent invites that converted to an install."""
        if self.total_invites_sent == 0:
            return 0.0
        return self.total_invites_accepted / self.total_invites_sent
