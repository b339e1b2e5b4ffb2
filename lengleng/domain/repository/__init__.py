"""Repository interfaces for the invitation engine.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from lengleng.domain.repository.invitation import InvitationRepository
from lengleng.domain.repository.ledger import QuotaLedgerRepository

__all__ = [
    "InvitationRepository",
    "QuotaLedgerRepository",
]
