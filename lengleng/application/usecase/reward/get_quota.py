"""Get quota use case."""

from pydantic import BaseModel

from lengleng.application.usecase.base import BaseUseCase
from lengleng.domain.model import QuotaLedger
from lengleng.domain.service import QuotaLedgerService
from lengleng.domain.value import UserId


class GetQuotaRequest(BaseModel):
    """Quota request."""

    user_id: str


class GetQuotaResponse(BaseModel):
    """The user's ledger, created with the default quota if new."""

    ledger: QuotaLedger


class GetQuotaUseCase(BaseUseCase):
    """Use case for reading a user's invite quota and stats."""

    def __init__(self, ledger_service: QuotaLedgerService) -> None:
        self.ledger_service = ledger_service

    async def execute(self, request: GetQuotaRequest) -> GetQuotaResponse:
        ledger = await self.ledger_service.get_ledger(UserId(request.user_id))
        return GetQuotaResponse(ledger=ledger)
