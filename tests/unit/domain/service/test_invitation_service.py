"""Unit tests for InvitationService."""

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest

from lengleng.domain.error import (
    InvalidContactError,
    NoInvitesRemainingError,
    SendFailedError,
)
from lengleng.domain.repository import InvitationRepository, QuotaLedgerRepository
from lengleng.domain.service import (
    Clock,
    InvitationService,
    Notifier,
    QuotaLedgerService,
)
from lengleng.domain.value import InvitationId, InvitationStatus, MessageVariant, UserId
from tests.conftest import make_contact
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

SENDER = UserId("sender-1")


class TestSendInvite:
    """Tests for send_invite."""

    @pytest.mark.asyncio
    async def test_successful_send_spends_one_invite(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        ledger_service = await unit_env.get(QuotaLedgerService)
        invitation_repo = await unit_env.get(InvitationRepository)
        clock = await unit_env.get(Clock)

        # Act
        invitation = await invitation_service.send_invite(SENDER, make_contact())

        # Assert
        assert invitation.status == InvitationStatus.SENT
        assert invitation.tracking_data.reminder_count == 0
        assert invitation.tracking_data.clicked_at is None
        assert invitation.created_at == clock.now()
        assert invitation.expires_at == clock.now() + timedelta(hours=24)
        assert invitation.recipient_phone == "5551234567"
        assert invitation.recipient_name == "Jamie"

        ledger = await ledger_service.get_ledger(SENDER)
        assert ledger.available_invites == 9
        assert ledger.total_invites_sent == 1

        stored = await invitation_repo.find_by_sender(SENDER)
        assert [inv.id for inv in stored] == [invitation.id]

    @pytest.mark.asyncio
    async def test_delivers_message_with_invite_link(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        notifier = await unit_env.get(Notifier)

        # Act
        invitation = await invitation_service.send_invite(
            SENDER, make_contact(), message="Come rate me!"
        )

        # Assert
        assert invitation.message == "Come rate me!"
        assert len(notifier.delivered) == 1
        delivered = notifier.delivered[0]
        assert delivered.recipient_phone == "5551234567"
        assert delivered.body == (
            f"Come rate me!\n\nhttps://lengleng.app/invite/{invitation.id}"
        )

    @pytest.mark.asyncio
    async def test_template_message_when_none_given(self, unit_env):
        """The default clock reads 09:00, so the time-based family is used."""
        invitation_service = await unit_env.get(InvitationService)

        invitation = await invitation_service.send_invite(SENDER, make_contact())

        assert invitation.message_variant == MessageVariant.TIME_BASED
        assert "Lincoln High" in invitation.message
        assert "morning" in invitation.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("phone", ["", "   ", "not a phone", "123"])
    async def test_invalid_contact_rejected_before_any_mutation(self, unit_env, phone):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        invitation_repo = await unit_env.get(InvitationRepository)
        ledger_repo = await unit_env.get(QuotaLedgerRepository)
        notifier = await unit_env.get(Notifier)

        # Act
        with pytest.raises(InvalidContactError) as exc_info:
            await invitation_service.send_invite(SENDER, make_contact(phone))

        # Assert
        assert exc_info.value.phone_number == phone
        assert await invitation_repo.find_by_sender(SENDER) == []
        assert await ledger_repo.find_by_user(SENDER) is None
        assert notifier.delivered == []

    @pytest.mark.asyncio
    async def test_invalid_contact_wins_over_exhausted_quota(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        ledger_repo = await unit_env.get(QuotaLedgerRepository)
        await ledger_repo.get_or_create(SENDER, 0)

        with pytest.raises(InvalidContactError):
            await invitation_service.send_invite(SENDER, make_contact(""))

    @pytest.mark.asyncio
    async def test_no_quota_creates_nothing(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        invitation_repo = await unit_env.get(InvitationRepository)
        ledger_repo = await unit_env.get(QuotaLedgerRepository)
        notifier = await unit_env.get(Notifier)
        await ledger_repo.get_or_create(SENDER, 0)

        # Act
        with pytest.raises(NoInvitesRemainingError) as exc_info:
            await invitation_service.send_invite(SENDER, make_contact())

        # Assert
        assert exc_info.value.user_id == SENDER
        assert await invitation_repo.find_by_sender(SENDER) == []
        assert notifier.delivered == []
        ledger = await ledger_repo.find_by_user(SENDER)
        assert ledger.available_invites == 0

    @pytest.mark.asyncio
    async def test_rejected_delivery_restores_quota_and_withdraws(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        invitation_repo = await unit_env.get(InvitationRepository)
        ledger_service = await unit_env.get(QuotaLedgerService)
        notifier = await unit_env.get(Notifier)
        notifier.fail_deliveries = True

        # Act
        with pytest.raises(SendFailedError):
            await invitation_service.send_invite(SENDER, make_contact())

        # Assert
        ledger = await ledger_service.get_ledger(SENDER)
        assert ledger.available_invites == 10
        assert ledger.total_invites_sent == 0

        stored = await invitation_repo.find_by_sender(SENDER)
        assert len(stored) == 1
        assert stored[0].status == InvitationStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_raising_delivery_restores_quota(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        ledger_service = await unit_env.get(QuotaLedgerService)
        notifier = await unit_env.get(Notifier)
        notifier.raise_on_deliver = ConnectionError("SMS gateway down")

        # Act
        with pytest.raises(SendFailedError) as exc_info:
            await invitation_service.send_invite(SENDER, make_contact())

        # Assert
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        ledger = await ledger_service.get_ledger(SENDER)
        assert ledger.available_invites == 10

    @pytest.mark.asyncio
    async def test_persistence_failure_restores_quota(self, unit_env, monkeypatch):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        invitation_repo = await unit_env.get(InvitationRepository)
        ledger_service = await unit_env.get(QuotaLedgerService)
        notifier = await unit_env.get(Notifier)

        async def failing_save(invitation):
            raise OSError("store unavailable")

        monkeypatch.setattr(invitation_repo, "save", failing_save)

        # Act
        with pytest.raises(SendFailedError):
            await invitation_service.send_invite(SENDER, make_contact())

        # Assert
        ledger = await ledger_service.get_ledger(SENDER)
        assert ledger.available_invites == 10
        assert notifier.delivered == []

    @pytest.mark.asyncio
    async def test_persistence_timeout_restores_quota(self, unit_env, monkeypatch):
        """A save that outlives the caller's deadline counts as failed."""
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        invitation_repo = await unit_env.get(InvitationRepository)
        ledger_service = await unit_env.get(QuotaLedgerService)
        clock = await unit_env.get(Clock)

        async def slow_save(invitation):
            await asyncio.sleep(1)
            return invitation

        monkeypatch.setattr(invitation_repo, "save", slow_save)
        deadline = clock.now() + timedelta(milliseconds=50)

        # Act
        with pytest.raises(SendFailedError) as exc_info:
            await invitation_service.send_invite(
                SENDER, make_contact(), deadline=deadline
            )

        # Assert
        assert isinstance(exc_info.value.__cause__, TimeoutError)
        ledger = await ledger_service.get_ledger(SENDER)
        assert ledger.available_invites == 10

    @pytest.mark.asyncio
    async def test_passed_deadline_fails_without_spending(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        ledger_repo = await unit_env.get(QuotaLedgerRepository)
        clock = await unit_env.get(Clock)

        # Act
        with pytest.raises(SendFailedError, match="deadline"):
            await invitation_service.send_invite(
                SENDER, make_contact(), deadline=clock.now()
            )

        # Assert
        assert await ledger_repo.find_by_user(SENDER) is None

    @pytest.mark.asyncio
    async def test_concurrent_sends_respect_quota(self, unit_env):
        """N concurrent sends against k < N invites: k succeed, N-k are rejected."""
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        invitation_repo = await unit_env.get(InvitationRepository)
        ledger_repo = await unit_env.get(QuotaLedgerRepository)
        await ledger_repo.get_or_create(SENDER, 3)

        # Act
        results = await asyncio.gather(
            *(
                invitation_service.send_invite(
                    SENDER, make_contact(f"555123456{i}")
                )
                for i in range(8)
            ),
            return_exceptions=True,
        )

        # Assert
        sent = [r for r in results if not isinstance(r, Exception)]
        rejected = [r for r in results if isinstance(r, NoInvitesRemainingError)]
        assert len(sent) == 3
        assert len(rejected) == 5
        ledger = await ledger_repo.find_by_user(SENDER)
        assert ledger.available_invites == 0
        assert len(await invitation_repo.find_by_sender(SENDER)) == 3


class TestMarkClicked:
    """Tests for mark_clicked."""

    @pytest.mark.asyncio
    async def test_sent_moves_to_clicked(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        clock = await unit_env.get(Clock)
        invitation = await invitation_service.send_invite(SENDER, make_contact())
        clock.advance(timedelta(minutes=5))

        # Act
        result = await invitation_service.mark_clicked(invitation.id)

        # Assert
        assert result.changed is True
        assert result.invitation.status == InvitationStatus.CLICKED
        assert result.invitation.tracking_data.clicked_at == clock.now()

    @pytest.mark.asyncio
    async def test_second_click_is_noop(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        clock = await unit_env.get(Clock)
        invitation = await invitation_service.send_invite(SENDER, make_contact())
        first = await invitation_service.mark_clicked(invitation.id)
        clock.advance(timedelta(minutes=5))

        # Act
        second = await invitation_service.mark_clicked(invitation.id)

        # Assert
        assert second.changed is False
        assert second.invitation == first.invitation

    @pytest.mark.asyncio
    async def test_unknown_invitation_is_soft_noop(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)

        result = await invitation_service.mark_clicked(InvitationId(uuid4()))

        assert result.invitation is None
        assert result.changed is False

    @pytest.mark.asyncio
    async def test_click_after_install_does_not_regress(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        invitation = await invitation_service.send_invite(SENDER, make_contact())
        await invitation_service.mark_installed(invitation.id)

        # Act
        result = await invitation_service.mark_clicked(invitation.id)

        # Assert
        assert result.changed is False
        assert result.invitation.status == InvitationStatus.INSTALLED
        assert result.invitation.tracking_data.clicked_at is None

    @pytest.mark.asyncio
    async def test_click_after_expiry_does_not_regress(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        clock = await unit_env.get(Clock)
        invitation = await invitation_service.send_invite(SENDER, make_contact())
        clock.advance(timedelta(hours=25))

        # Act
        result = await invitation_service.mark_clicked(invitation.id)

        # Assert
        assert result.invitation.status == InvitationStatus.EXPIRED
        assert result.invitation.tracking_data.clicked_at is None


class TestMarkInstalled:
    """Tests for mark_installed."""

    @pytest.mark.asyncio
    async def test_install_converts_and_rewards_sender(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        ledger_service = await unit_env.get(QuotaLedgerService)
        clock = await unit_env.get(Clock)
        invitation = await invitation_service.send_invite(SENDER, make_contact())
        await invitation_service.mark_clicked(invitation.id)
        clock.advance(timedelta(hours=1))

        # Act
        result = await invitation_service.mark_installed(invitation.id)

        # Assert
        assert result.changed is True
        assert result.reward == 5
        assert result.invitation.status == InvitationStatus.INSTALLED
        assert result.invitation.tracking_data.installed_at == clock.now()

        ledger = await ledger_service.get_ledger(SENDER)
        assert ledger.total_invites_accepted == 1
        assert ledger.available_invites == 9 + 5

    @pytest.mark.asyncio
    async def test_install_straight_from_sent(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        invitation = await invitation_service.send_invite(SENDER, make_contact())

        result = await invitation_service.mark_installed(invitation.id)

        assert result.invitation.status == InvitationStatus.INSTALLED

    @pytest.mark.asyncio
    async def test_repeated_install_rewards_once(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        ledger_service = await unit_env.get(QuotaLedgerService)
        invitation = await invitation_service.send_invite(SENDER, make_contact())
        await invitation_service.mark_installed(invitation.id)

        # Act
        second = await invitation_service.mark_installed(invitation.id)

        # Assert
        assert second.changed is False
        assert second.reward == 0
        ledger = await ledger_service.get_ledger(SENDER)
        assert ledger.total_invites_accepted == 1
        assert ledger.available_invites == 14

    @pytest.mark.asyncio
    async def test_concurrent_installs_reward_once(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        ledger_service = await unit_env.get(QuotaLedgerService)
        invitation = await invitation_service.send_invite(SENDER, make_contact())

        # Act
        results = await asyncio.gather(
            *(invitation_service.mark_installed(invitation.id) for _ in range(5))
        )

        # Assert
        assert sum(r.changed for r in results) == 1
        assert sum(r.reward for r in results) == 5
        ledger = await ledger_service.get_ledger(SENDER)
        assert ledger.total_invites_accepted == 1

    @pytest.mark.asyncio
    async def test_replayed_install_finishes_failed_credit(self, unit_env, monkeypatch):
        """A ledger outage during the credit is recovered by the retried callback."""
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        ledger_service = await unit_env.get(QuotaLedgerService)
        ledger_repo = await unit_env.get(QuotaLedgerRepository)
        invitation = await invitation_service.send_invite(SENDER, make_contact())

        original_save = ledger_repo.save_if_version
        failures = []

        async def flaky_save(ledger, expected_version):
            if not failures:
                failures.append(ledger.user_id)
                raise ConnectionError("ledger unavailable")
            return await original_save(ledger, expected_version)

        monkeypatch.setattr(ledger_repo, "save_if_version", flaky_save)

        # Act
        with pytest.raises(ConnectionError):
            await invitation_service.mark_installed(invitation.id)
        pending = await invitation_service.get_invitation(invitation.id)
        replay = await invitation_service.mark_installed(invitation.id)
        third = await invitation_service.mark_installed(invitation.id)

        # Assert
        assert pending.status == InvitationStatus.INSTALLED
        assert pending.tracking_data.reward_credited_at is None
        assert replay.reward == 5
        assert replay.invitation.tracking_data.reward_credited_at is not None
        assert third.reward == 0
        ledger = await ledger_service.get_ledger(SENDER)
        assert ledger.total_invites_accepted == 1
        assert ledger.available_invites == 9 + 5

    @pytest.mark.asyncio
    async def test_late_install_recorded_without_reward(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        ledger_service = await unit_env.get(QuotaLedgerService)
        clock = await unit_env.get(Clock)
        invitation = await invitation_service.send_invite(SENDER, make_contact())
        clock.advance(timedelta(hours=30))

        # Act
        result = await invitation_service.mark_installed(invitation.id)

        # Assert
        assert result.reward == 0
        assert result.invitation.status == InvitationStatus.EXPIRED
        assert result.invitation.tracking_data.installed_at == clock.now()
        ledger = await ledger_service.get_ledger(SENDER)
        assert ledger.total_invites_accepted == 0
        assert ledger.available_invites == 9

    @pytest.mark.asyncio
    async def test_unknown_invitation_is_soft_noop(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)

        result = await invitation_service.mark_installed(InvitationId(uuid4()))

        assert result.invitation is None
        assert result.reward == 0


class TestExpiry:
    """Tests for lazy expiry and the sweep."""

    @pytest.mark.asyncio
    async def test_read_after_expiry_reports_and_stores_expired(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        invitation_repo = await unit_env.get(InvitationRepository)
        clock = await unit_env.get(Clock)
        invitation = await invitation_service.send_invite(SENDER, make_contact())
        clock.advance(timedelta(hours=24))

        # Act
        current = await invitation_service.get_invitation(invitation.id)

        # Assert
        assert current.status == InvitationStatus.EXPIRED
        stored = await invitation_repo.find_by_id(invitation.id)
        assert stored.status == InvitationStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_read_before_expiry_keeps_status(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        clock = await unit_env.get(Clock)
        invitation = await invitation_service.send_invite(SENDER, make_contact())
        clock.advance(timedelta(hours=23, minutes=59))

        current = await invitation_service.get_invitation(invitation.id)

        assert current.status == InvitationStatus.SENT

    @pytest.mark.asyncio
    async def test_installed_never_expires(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        clock = await unit_env.get(Clock)
        invitation = await invitation_service.send_invite(SENDER, make_contact())
        await invitation_service.mark_installed(invitation.id)
        clock.advance(timedelta(days=3))

        current = await invitation_service.expire(invitation.id)

        assert current.status == InvitationStatus.INSTALLED

    @pytest.mark.asyncio
    async def test_expire_unknown_returns_none(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)

        assert await invitation_service.expire(InvitationId(uuid4())) is None

    @pytest.mark.asyncio
    async def test_sweep_expires_only_due_active_invitations(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        clock = await unit_env.get(Clock)
        old = await invitation_service.send_invite(SENDER, make_contact("5550000001"))
        installed = await invitation_service.send_invite(
            SENDER, make_contact("5550000002")
        )
        await invitation_service.mark_installed(installed.id)
        clock.advance(timedelta(hours=12))
        fresh = await invitation_service.send_invite(SENDER, make_contact("5550000003"))
        clock.advance(timedelta(hours=13))

        # Act
        expired = await invitation_service.sweep_expired(SENDER)

        # Assert
        assert [inv.id for inv in expired] == [old.id]
        current = await invitation_service.get_invitation(fresh.id)
        assert current.status == InvitationStatus.SENT


class TestListInvitations:
    """Tests for list_invitations."""

    @pytest.mark.asyncio
    async def test_newest_first_with_expiry_applied(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        clock = await unit_env.get(Clock)
        first = await invitation_service.send_invite(SENDER, make_contact("5550000001"))
        clock.advance(timedelta(hours=20))
        second = await invitation_service.send_invite(
            SENDER, make_contact("5550000002")
        )
        clock.advance(timedelta(hours=5))

        # Act
        invitations = await invitation_service.list_invitations(SENDER)

        # Assert
        assert [inv.id for inv in invitations] == [second.id, first.id]
        assert invitations[0].status == InvitationStatus.SENT
        assert invitations[1].status == InvitationStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_status_filter_sees_current_state(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        clock = await unit_env.get(Clock)
        await invitation_service.send_invite(SENDER, make_contact())
        clock.advance(timedelta(days=2))

        # Act
        sent = await invitation_service.list_invitations(
            SENDER, status=InvitationStatus.SENT
        )
        expired = await invitation_service.list_invitations(
            SENDER, status=InvitationStatus.EXPIRED
        )

        # Assert
        assert sent == []
        assert len(expired) == 1

    @pytest.mark.asyncio
    async def test_other_senders_not_listed(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        await invitation_service.send_invite(UserId("someone-else"), make_contact())

        assert await invitation_service.list_invitations(SENDER) == []
