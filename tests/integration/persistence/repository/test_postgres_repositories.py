"""Integration tests for the PostgreSQL repositories.

Run against a migrated database (``alembic upgrade head``) by setting
DATABASE__URL. Every test uses fresh IDs so runs never collide.
"""

import asyncio
import os
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from lengleng.domain.error import NotFoundError
from lengleng.domain.model import Invitation
from lengleng.domain.repository import InvitationRepository, QuotaLedgerRepository
from lengleng.domain.value import InvitationId, InvitationStatus, LedgerField, UserId
from tests.harness import create_env_fixture

pytestmark = pytest.mark.skipif(
    not os.environ.get("DATABASE__URL"), reason="DATABASE__URL not set"
)

integration_env = create_env_fixture(unmock={"persistence"})


def _invitation(sender_id: UserId, created_at: datetime) -> Invitation:
    return Invitation(
        id=InvitationId(uuid4()),
        sender_id=sender_id,
        recipient_phone="5551234567",
        recipient_name="Jamie",
        message="Join me on LengLeng",
        created_at=created_at,
        expires_at=created_at + timedelta(hours=24),
    )


class TestPostgresInvitationRepository:
    """Integration tests for PostgresInvitationRepository."""

    @pytest.mark.asyncio
    async def test_save_and_find_round_trip(self, integration_env):
        # Arrange
        repo = await integration_env.get(InvitationRepository)
        invitation = _invitation(
            UserId(f"user-{uuid4()}"), datetime.now(timezone.utc)
        )

        # Act
        await repo.save(invitation)
        found = await repo.find_by_id(invitation.id)

        # Assert
        assert found == invitation
        assert await repo.find_by_id(InvitationId(uuid4())) is None

    @pytest.mark.asyncio
    async def test_save_if_version_rejects_stale_write(self, integration_env):
        # Arrange
        repo = await integration_env.get(InvitationRepository)
        invitation = await repo.save(
            _invitation(UserId(f"user-{uuid4()}"), datetime.now(timezone.utc))
        )
        clicked = invitation.model_copy(
            update={"status": InvitationStatus.CLICKED, "version": 1}
        )
        expired = invitation.model_copy(
            update={"status": InvitationStatus.EXPIRED, "version": 1}
        )

        # Act
        first = await repo.save_if_version(clicked, expected_version=0)
        second = await repo.save_if_version(expired, expected_version=0)

        # Assert
        assert (first, second) == (True, False)
        stored = await repo.find_by_id(invitation.id)
        assert stored.status == InvitationStatus.CLICKED
        assert stored.version == 1

    @pytest.mark.asyncio
    async def test_find_by_sender_newest_first_with_filter(self, integration_env):
        # Arrange
        repo = await integration_env.get(InvitationRepository)
        sender = UserId(f"user-{uuid4()}")
        start = datetime.now(timezone.utc)
        older = await repo.save(_invitation(sender, start))
        newer = await repo.save(_invitation(sender, start + timedelta(minutes=5)))
        await repo.save(_invitation(UserId(f"user-{uuid4()}"), start))
        await repo.save_if_version(
            older.model_copy(update={"status": InvitationStatus.CLICKED, "version": 1}),
            expected_version=0,
        )

        # Act
        everything = await repo.find_by_sender(sender)
        clicked = await repo.find_by_sender(sender, InvitationStatus.CLICKED)
        second_page = await repo.find_by_sender(sender, limit=1, offset=1)

        # Assert
        assert [inv.id for inv in everything] == [newer.id, older.id]
        assert [inv.id for inv in clicked] == [older.id]
        assert [inv.id for inv in second_page] == [older.id]


class TestPostgresQuotaLedgerRepository:
    """Integration tests for PostgresQuotaLedgerRepository."""

    @pytest.mark.asyncio
    async def test_get_or_create_keeps_existing_ledger(self, integration_env):
        repo = await integration_env.get(QuotaLedgerRepository)
        user_id = UserId(f"user-{uuid4()}")

        created = await repo.get_or_create(user_id, 10)
        again = await repo.get_or_create(user_id, 99)

        assert created.available_invites == 10
        assert again.available_invites == 10
        assert await repo.find_by_user(UserId(f"user-{uuid4()}")) is None

    @pytest.mark.asyncio
    async def test_try_decrement_never_goes_negative(self, integration_env):
        # Arrange
        repo = await integration_env.get(QuotaLedgerRepository)
        user_id = UserId(f"user-{uuid4()}")
        await repo.get_or_create(user_id, 3)

        # Act
        results = await asyncio.gather(
            *(
                repo.try_decrement(user_id, LedgerField.AVAILABLE_INVITES, 1)
                for _ in range(8)
            )
        )

        # Assert
        assert sum(results) == 3
        ledger = await repo.find_by_user(user_id)
        assert ledger.available_invites == 0

    @pytest.mark.asyncio
    async def test_increment_counters(self, integration_env):
        repo = await integration_env.get(QuotaLedgerRepository)
        user_id = UserId(f"user-{uuid4()}")
        await repo.get_or_create(user_id, 0)

        await repo.increment(user_id, LedgerField.AVAILABLE_INVITES, 5)
        await repo.increment(user_id, LedgerField.TOTAL_INVITES_ACCEPTED, 1)

        ledger = await repo.find_by_user(user_id)
        assert ledger.available_invites == 5
        assert ledger.total_invites_accepted == 1

    @pytest.mark.asyncio
    async def test_increment_missing_ledger_raises(self, integration_env):
        repo = await integration_env.get(QuotaLedgerRepository)

        with pytest.raises(NotFoundError):
            await repo.increment(
                UserId(f"user-{uuid4()}"), LedgerField.AVAILABLE_INVITES, 1
            )

    @pytest.mark.asyncio
    async def test_save_if_version_detects_concurrent_change(self, integration_env):
        # Arrange
        repo = await integration_env.get(QuotaLedgerRepository)
        user_id = UserId(f"user-{uuid4()}")
        ledger = await repo.get_or_create(user_id, 10)
        awarded = ledger.model_copy(
            update={
                "available_invites": 12,
                "invite_streak": 3,
                "version": ledger.version + 1,
            }
        )
        # Another writer bumps the version first
        await repo.increment(user_id, LedgerField.TOTAL_INVITES_SENT, 1)

        # Act
        saved = await repo.save_if_version(awarded, ledger.version)

        # Assert
        assert saved is False
        stored = await repo.find_by_user(user_id)
        assert stored.available_invites == 10
        assert stored.total_invites_sent == 1
