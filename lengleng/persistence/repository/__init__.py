"""PostgreSQL repository implementations."""

from lengleng.persistence.repository.invitation import PostgresInvitationRepository
from lengleng.persistence.repository.ledger import PostgresQuotaLedgerRepository

__all__ = [
    "PostgresInvitationRepository",
    "PostgresQuotaLedgerRepository",
]
