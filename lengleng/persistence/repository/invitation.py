"""PostgreSQL implementation of Invitation repository."""

from typing import Optional

from sqlalchemy import and_, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lengleng.domain.model import Invitation
from lengleng.domain.repository import InvitationRepository
from lengleng.domain.value import InvitationId, InvitationStatus, UserId
from lengleng.persistence.mappers import invitation_to_dict, row_to_invitation
from lengleng.persistence.tables import invitations_table


class PostgresInvitationRepository(InvitationRepository):
    """PostgreSQL implementation of InvitationRepository.

    Each call runs in its own short transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID.

        Args:
            invitation_id: Invitation ID to look up

        Returns:
            Invitation if found, None otherwise
        """
        stmt = select(invitations_table).where(invitations_table.c.id == invitation_id)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def save(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation.

        Args:
            invitation: Invitation to store

        Returns:
            Stored invitation
        """
        stmt = insert(invitations_table).values(**invitation_to_dict(invitation))
        async with self.session_factory.begin() as session:
            await session.execute(stmt)
        return invitation

    async def save_if_version(
        self, invitation: Invitation, expected_version: int
    ) -> bool:
        """Replace an invitation if its stored version still matches.

        Args:
            invitation: New state
            expected_version: Version read before mutating

        Returns:
            True if exactly one row was updated
        """
        values = invitation_to_dict(invitation)
        del values["id"]
        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.id == invitation.id,
                    invitations_table.c.version == expected_version,
                )
            )
            .values(**values)
            .returning(invitations_table.c.id)
        )
        async with self.session_factory.begin() as session:
            result = await session.execute(stmt)
            return result.first() is not None

    async def find_by_sender(
        self,
        sender_id: UserId,
        status: Optional[InvitationStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        """Find invitations by sender, newest first.

        Args:
            sender_id: Sender user ID
            status: Optional filter by stored status
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of invitations
        """
        stmt = select(invitations_table).where(
            invitations_table.c.sender_id == sender_id
        )
        if status:
            stmt = stmt.where(invitations_table.c.status == status.value)

        stmt = (
            stmt.order_by(
                invitations_table.c.created_at.desc(), invitations_table.c.id
            )
            .limit(limit)
            .offset(offset)
        )

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_invitation(dict(row)) for row in rows]
