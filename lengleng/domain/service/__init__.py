"""Domain services."""

from .base import Service
from .clock import Clock
from .identity import IdentityProvider
from .invitation_service import InvitationService, TransitionResult
from .message_composer import MessageComposer
from .notifier import Notifier
from .quota_ledger_service import QuotaLedgerService
from .reminder_scheduler import ReminderScheduler
from .reward_calculator import RewardCalculator

__all__ = [
    "Clock",
    "IdentityProvider",
    "InvitationService",
    "MessageComposer",
    "Notifier",
    "QuotaLedgerService",
    "ReminderScheduler",
    "RewardCalculator",
    "Service",
    "TransitionResult",
]
