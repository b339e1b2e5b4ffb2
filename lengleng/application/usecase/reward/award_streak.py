"""Award streak use case."""

from pydantic import BaseModel, Field

from lengleng.application.usecase.base import BaseUseCase
from lengleng.domain.service import QuotaLedgerService
from lengleng.domain.value import UserId


class AwardStreakRequest(BaseModel):
    """Streak award request."""

    user_id: str
    days: int = Field(ge=0)  # Activity streak length, computed by the caller


class AwardStreakResponse(BaseModel):
    """Streak award response."""

    awarded: int
    available_invites: int


class AwardStreakUseCase(BaseUseCase):
    """Use case for crediting the activity-streak reward.

    Safe to call on every app open: a streak window is credited once.
    """

    def __init__(self, ledger_service: QuotaLedgerService) -> None:
        """Initialize use case.

        Args:
            ledger_service: Quota ledger service
        """
        self.ledger_service = ledger_service

    async def execute(self, request: AwardStreakRequest) -> AwardStreakResponse:
        """Credit whatever part of the streak award is not yet paid.

        Args:
            request: Streak award request

        Returns:
            Credited amount and the new quota
        """
        user_id = UserId(request.user_id)
        awarded = await self.ledger_service.award_streak(user_id, request.days)
        ledger = await self.ledger_service.get_ledger(user_id)
        return AwardStreakResponse(
            awarded=awarded, available_invites=ledger.available_invites
        )
