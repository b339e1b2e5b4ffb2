"""In-memory repository implementations for testing."""

from .invitation import InMemoryInvitationRepository
from .ledger import InMemoryQuotaLedgerRepository

__all__ = [
    "InMemoryInvitationRepository",
    "InMemoryQuotaLedgerRepository",
]
