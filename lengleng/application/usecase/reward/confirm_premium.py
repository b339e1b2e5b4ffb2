"""Confirm premium use case."""

import logfire
from pydantic import BaseModel

from lengleng.application.usecase.base import BaseUseCase
from lengleng.domain.service import IdentityProvider, QuotaLedgerService
from lengleng.domain.value import UserId


class ConfirmPremiumRequest(BaseModel):
    """Premium confirmation request."""

    user_id: str


class ConfirmPremiumResponse(BaseModel):
    """Premium confirmation response."""

    is_premium: bool
    awarded: int
    available_invites: int


class ConfirmPremiumUseCase(BaseUseCase):
    """Use case for syncing premium status after a subscription event.

    The identity provider is the source of truth; the award is paid once
    per activation no matter how often this runs.
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        ledger_service: QuotaLedgerService,
    ) -> None:
        """Initialize use case.

        Args:
            identity_provider: Supplies premium status
            ledger_service: Quota ledger service
        """
        self.identity_provider = identity_provider
        self.ledger_service = ledger_service

    async def execute(self, request: ConfirmPremiumRequest) -> ConfirmPremiumResponse:
        """Read premium status and credit the award on activation.

        Args:
            request: Premium confirmation request

        Returns:
            Premium status, credited amount and the new quota
        """
        user_id = UserId(request.user_id)

        with logfire.span("confirm_premium.execute", user_id=user_id):
            is_premium = await self.identity_provider.is_premium(user_id)
            awarded = await self.ledger_service.confirm_premium(user_id, is_premium)
            ledger = await self.ledger_service.get_ledger(user_id)

            return ConfirmPremiumResponse(
                is_premium=is_premium,
                awarded=awarded,
                available_invites=ledger.available_invites,
            )
