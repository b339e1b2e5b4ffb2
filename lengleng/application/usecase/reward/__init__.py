"""Reward use cases."""

from .award_streak import AwardStreakRequest, AwardStreakResponse, AwardStreakUseCase
from .confirm_premium import (
    ConfirmPremiumRequest,
    ConfirmPremiumResponse,
    ConfirmPremiumUseCase,
)
from .get_quota import GetQuotaRequest, GetQuotaResponse, GetQuotaUseCase

__all__ = [
    "AwardStreakRequest",
    "AwardStreakResponse",
    "AwardStreakUseCase",
    "ConfirmPremiumRequest",
    "ConfirmPremiumResponse",
    "ConfirmPremiumUseCase",
    "GetQuotaRequest",
    "GetQuotaResponse",
    "GetQuotaUseCase",
]
