"""Invitation lifecycle domain service."""

from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

import logfire
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from lengleng.config import InvitationSettings
from lengleng.domain.error import (
    ConcurrentModificationError,
    InvalidContactError,
    NoInvitesRemainingError,
    NotFoundError,
    SendFailedError,
)
from lengleng.domain.model.invitation import Invitation
from lengleng.domain.repository import InvitationRepository
from lengleng.domain.value import (
    Contact,
    InvitationId,
    InvitationStatus,
    PhoneNumber,
    UserId,
)
from lengleng.util.deadline import bounded, time_budget

from .base import Service
from .clock import Clock
from .message_composer import MessageComposer
from .notifier import Notifier
from .quota_ledger_service import QuotaLedgerService
from .reward_calculator import RewardCalculator

# Returns the new state, or None when the transition does not apply
Mutation = Callable[[Invitation], Invitation | None]


class TransitionResult(BaseModel):
    """Outcome of applying an event to an invitation."""

    invitation: Invitation | None  # None if the invitation does not exist
    changed: bool = False
    reward: int = 0


class InvitationService(Service):
    """Domain service for the invitation state machine.

    Every read applies lazy expiry first, and every write is a
    compare-and-swap on the invitation version, so concurrent click and
    install callbacks for one invitation are linearized.
    """

    PAGE_SIZE = 100

    def __init__(
        self,
        invitation_repository: InvitationRepository,
        ledger_service: QuotaLedgerService,
        reward_calculator: RewardCalculator,
        message_composer: MessageComposer,
        notifier: Notifier,
        clock: Clock,
        invitation_settings: InvitationSettings,
    ) -> None:
        """Initialize invitation service.

        Args:
            invitation_repository: Invitation repository
            ledger_service: Quota ledger domain service
            reward_calculator: Reward calculator
            message_composer: Builds invite texts and links
            notifier: Delivery transport
            clock: Time source
            invitation_settings: Invitation settings
        """
        self.invitation_repository = invitation_repository
        self.ledger_service = ledger_service
        self.reward_calculator = reward_calculator
        self.message_composer = message_composer
        self.notifier = notifier
        self.clock = clock
        self.settings = invitation_settings

    def _budget(self, deadline: datetime | None = None) -> float:
        return time_budget(
            self.clock.now(), deadline, self.settings.store_timeout_seconds
        )

    # ------------------------------------------------------------------
    # Send
    # ------------------------------------------------------------------

    async def send_invite(
        self,
        sender_id: UserId,
        contact: Contact,
        message: str | None = None,
        deadline: datetime | None = None,
    ) -> Invitation:
        """Send an invitation, spending one invite of the sender's quota.

        Validation and quota errors are raised before anything is written.
        Any failure after the quota was reserved credits it back before
        SendFailedError is raised.

        Args:
            sender_id: User sending the invite
            contact: Recipient picked from the address book
            message: Custom message; a template is used if omitted
            deadline: Absolute time after which the send counts as failed

        Returns:
            The persisted invitation in ``sent`` status

        Raises:
            InvalidContactError: If the phone number is empty or malformed
            NoInvitesRemainingError: If the sender's quota is exhausted
            SendFailedError: If persistence or delivery failed
        """
        with logfire.span(
            "invitation_service.send_invite",
            sender_id=sender_id,
            custom_message=message is not None,
        ):
            phone = self._validate_contact(contact)

            now = self.clock.now()
            if deadline is not None and deadline <= now:
                raise SendFailedError(sender_id, "deadline passed before sending")

            try:
                reserved = await bounded(
                    self.ledger_service.try_send_decrement(sender_id),
                    self._budget(deadline),
                )
            except Exception as e:
                # Outcome unknown; crediting back could mint quota
                logfire.error(
                    "Quota reservation failed", sender_id=sender_id, error=repr(e)
                )
                raise SendFailedError(sender_id, "quota reservation failed") from e
            if not reserved:
                raise NoInvitesRemainingError(sender_id)

            invitation = self._build_invitation(sender_id, contact, phone, message)

            try:
                await bounded(
                    self.invitation_repository.save(invitation),
                    self._budget(deadline),
                )
            except Exception as e:
                logfire.error(
                    "Persisting invitation failed",
                    sender_id=sender_id,
                    invitation_id=str(invitation.id),
                    error=repr(e),
                )
                await self._release_quota(sender_id)
                raise SendFailedError(sender_id, "persisting invitation failed") from e

            body = self.message_composer.with_link(invitation.message, invitation.id)
            delivery_error: Exception | None = None
            try:
                delivered = await bounded(
                    self.notifier.deliver(invitation.recipient_phone, body),
                    self._budget(deadline),
                )
            except Exception as e:
                delivered = False
                delivery_error = e

            if not delivered:
                logfire.error(
                    "Invite delivery failed",
                    sender_id=sender_id,
                    invitation_id=str(invitation.id),
                    error=repr(delivery_error) if delivery_error else "rejected",
                )
                await self._release_quota(sender_id)
                await self._withdraw(invitation)
                raise SendFailedError(
                    sender_id, "invite delivery failed"
                ) from delivery_error

            try:
                await self.ledger_service.record_invite_sent(sender_id)
            except Exception as e:
                # The invite is out; failing the call now would invite a resend
                logfire.error(
                    "Updating sent counter failed",
                    sender_id=sender_id,
                    error=repr(e),
                )

            logfire.info(
                "Invitation sent",
                invitation_id=str(invitation.id),
                sender_id=sender_id,
                variant=invitation.message_variant.value,
                expires_at=invitation.expires_at,
            )
            return invitation

    def _validate_contact(self, contact: Contact) -> PhoneNumber:
        try:
            return PhoneNumber(contact.phone_number)
        except PydanticValidationError as e:
            reason = e.errors()[0]["msg"] if e.errors() else "invalid phone number"
            logfire.warn(
                "Invalid contact", phone_number=contact.phone_number, reason=reason
            )
            raise InvalidContactError(contact.phone_number, reason) from e

    def _build_invitation(
        self,
        sender_id: UserId,
        contact: Contact,
        phone: PhoneNumber,
        message: str | None,
    ) -> Invitation:
        now = self.clock.now()
        variant = self.message_composer.determine_variant(now)
        return Invitation(
            id=InvitationId(uuid4()),
            sender_id=sender_id,
            recipient_phone=phone.root,
            recipient_name=contact.name,
            message=message
            if message
            else self.message_composer.compose(contact, variant, now),
            message_variant=variant,
            created_at=now,
            expires_at=now + self.settings.invite_ttl,
            status=InvitationStatus.SENT,
        )

    async def _release_quota(self, sender_id: UserId) -> None:
        """Compensate a reserved invite after a failed send."""
        try:
            await self.ledger_service.credit_invites(sender_id, 1)
            logfire.info("Reserved invite credited back", sender_id=sender_id)
        except Exception as e:
            logfire.error(
                "Compensating credit failed; quota must be reconciled",
                sender_id=sender_id,
                error=repr(e),
            )

    async def _withdraw(self, invitation: Invitation) -> None:
        """Retire an invitation whose message never went out.

        It moves to expired so it can never convert or earn an award for
        a quota unit that was already refunded.
        """
        withdrawn = invitation.model_copy(
            update={
                "status": InvitationStatus.EXPIRED,
                "version": invitation.version + 1,
            }
        )
        try:
            await bounded(
                self.invitation_repository.save_if_version(
                    withdrawn, invitation.version
                ),
                self._budget(),
            )
        except Exception as e:
            logfire.error(
                "Withdrawing undelivered invitation failed",
                invitation_id=str(invitation.id),
                error=repr(e),
            )

    # ------------------------------------------------------------------
    # Reads and lazy expiry
    # ------------------------------------------------------------------

    async def get_invitation(self, invitation_id: InvitationId) -> Invitation | None:
        """Get an invitation with lazy expiry applied.

        Args:
            invitation_id: Invitation ID

        Returns:
            The invitation, or None if it does not exist
        """
        invitation = await bounded(
            self.invitation_repository.find_by_id(invitation_id), self._budget()
        )
        if invitation is None:
            return None
        return await self.expire_if_due(invitation)

    async def expire_if_due(self, invitation: Invitation) -> Invitation:
        """Move an invitation past its expiry to ``expired``.

        Args:
            invitation: Invitation as last read

        Returns:
            The current state of the invitation

        Raises:
            ConcurrentModificationError: If the invitation keeps changing
        """
        current = invitation
        for _ in range(self.settings.max_conflict_retries):
            if not current.is_due_for_expiry(self.clock.now()):
                return current

            expired = current.model_copy(
                update={
                    "status": InvitationStatus.EXPIRED,
                    "version": current.version + 1,
                }
            )
            saved = await bounded(
                self.invitation_repository.save_if_version(expired, current.version),
                self._budget(),
            )
            if saved:
                logfire.info(
                    "Invitation expired",
                    invitation_id=str(current.id),
                    previous_status=current.status.value,
                )
                return expired

            reread = await bounded(
                self.invitation_repository.find_by_id(current.id), self._budget()
            )
            if reread is None:
                raise NotFoundError("Invitation", str(current.id))
            current = reread

        raise ConcurrentModificationError(
            "Invitation", str(invitation.id), self.settings.max_conflict_retries
        )

    async def expire(self, invitation_id: InvitationId) -> Invitation | None:
        """Apply the expiry check to one invitation.

        Args:
            invitation_id: Invitation ID

        Returns:
            The invitation's current state, or None if it does not exist
        """
        with logfire.span("invitation_service.expire", invitation_id=str(invitation_id)):
            return await self.get_invitation(invitation_id)

    async def active_invitations(self, sender_id: UserId) -> list[Invitation]:
        """All stored sent or clicked invitations of a sender, as stored.

        Pages through the repository without applying expiry, so callers
        that change each invitation still re-check it.

        Args:
            sender_id: Sender

        Returns:
            Every invitation stored with an active status
        """
        active: list[Invitation] = []
        for status in (InvitationStatus.SENT, InvitationStatus.CLICKED):
            offset = 0
            while True:
                page = await bounded(
                    self.invitation_repository.find_by_sender(
                        sender_id, status, limit=self.PAGE_SIZE, offset=offset
                    ),
                    self._budget(),
                )
                active.extend(page)
                if len(page) < self.PAGE_SIZE:
                    break
                offset += self.PAGE_SIZE
        return active

    async def sweep_expired(self, sender_id: UserId) -> list[Invitation]:
        """Apply the expiry check to all active invitations of a sender.

        Same rule as the lazy check, usable from a periodic job.

        Args:
            sender_id: Sender whose invitations are checked

        Returns:
            Invitations that were moved to expired by this sweep
        """
        with logfire.span("invitation_service.sweep_expired", sender_id=sender_id):
            active = await self.active_invitations(sender_id)

            expired: list[Invitation] = []
            for invitation in active:
                current = await self.expire_if_due(invitation)
                if (
                    current.status == InvitationStatus.EXPIRED
                    and invitation.status != InvitationStatus.EXPIRED
                ):
                    expired.append(current)

            logfire.info(
                "Expiry sweep finished",
                sender_id=sender_id,
                checked=len(active),
                expired=len(expired),
            )
            return expired

    async def list_invitations(
        self,
        sender_id: UserId,
        status: InvitationStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        """List invitations sent by a user, newest first.

        Args:
            sender_id: Sender
            status: Optional status filter (after expiry is applied)
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of invitations
        """
        with logfire.span(
            "invitation_service.list_invitations",
            sender_id=sender_id,
            status=status.value if status else None,
            limit=limit,
            offset=offset,
        ):
            # Settle expiry first so the status filter sees current states
            await self.sweep_expired(sender_id)
            invitations = await bounded(
                self.invitation_repository.find_by_sender(
                    sender_id, status, limit, offset
                ),
                self._budget(),
            )
            return [await self.expire_if_due(inv) for inv in invitations]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def apply_transition(
        self, invitation_id: InvitationId, mutate: Mutation
    ) -> TransitionResult:
        """Apply a state change with compare-and-swap, re-reading on conflict.

        ``mutate`` receives the current (expiry-checked) state and returns
        the new state with its version bumped, or None if the event does
        not apply to that state.

        Args:
            invitation_id: Invitation to change
            mutate: Transition function

        Returns:
            The resulting state and whether this call changed it

        Raises:
            ConcurrentModificationError: If every attempt lost a race
        """
        for _ in range(self.settings.max_conflict_retries):
            current = await self.get_invitation(invitation_id)
            if current is None:
                return TransitionResult(invitation=None)

            updated = mutate(current)
            if updated is None:
                return TransitionResult(invitation=current)

            saved = await bounded(
                self.invitation_repository.save_if_version(updated, current.version),
                self._budget(),
            )
            if saved:
                return TransitionResult(invitation=updated, changed=True)

            logfire.info(
                "Invitation changed concurrently, retrying",
                invitation_id=str(invitation_id),
            )

        raise ConcurrentModificationError(
            "Invitation", str(invitation_id), self.settings.max_conflict_retries
        )

    async def mark_clicked(self, invitation_id: InvitationId) -> TransitionResult:
        """Record a click on the invite link.

        Idempotent: only a ``sent`` invitation changes; repeated or stale
        callbacks and unknown IDs are no-ops.

        Args:
            invitation_id: Invitation from the deep link

        Returns:
            Transition outcome
        """
        with logfire.span(
            "invitation_service.mark_clicked", invitation_id=str(invitation_id)
        ):
            now = self.clock.now()

            def click(current: Invitation) -> Invitation | None:
                if current.status != InvitationStatus.SENT:
                    return None
                return current.model_copy(
                    update={
                        "status": InvitationStatus.CLICKED,
                        "tracking_data": current.tracking_data.model_copy(
                            update={"clicked_at": now}
                        ),
                        "version": current.version + 1,
                    }
                )

            result = await self.apply_transition(invitation_id, click)
            if result.invitation is None:
                logfire.warn(
                    "Click for unknown invitation", invitation_id=str(invitation_id)
                )
            elif result.changed:
                logfire.info("Invitation clicked", invitation_id=str(invitation_id))
            return result

    async def mark_installed(self, invitation_id: InvitationId) -> TransitionResult:
        """Record that the recipient installed the app.

        The first install of an active invitation converts it and claims
        the install award in the same compare-and-swap. The award is then
        credited to the sender. If crediting fails the claim is released
        and the error propagates, so a replayed install event finishes the
        credit. Installs after expiry are stored for audit only. Other
        repeated events are no-ops.

        Args:
            invitation_id: Invitation from the deep link

        Returns:
            Transition outcome, with the reward credited by this call
        """
        with logfire.span(
            "invitation_service.mark_installed", invitation_id=str(invitation_id)
        ):
            now = self.clock.now()

            def install(current: Invitation) -> Invitation | None:
                if current.tracking_data.installed_at is not None:
                    return None
                tracking_update: dict = {"installed_at": now}
                update: dict = {"version": current.version + 1}
                if current.status != InvitationStatus.EXPIRED:
                    update["status"] = InvitationStatus.INSTALLED
                    tracking_update["reward_credited_at"] = now
                update["tracking_data"] = current.tracking_data.model_copy(
                    update=tracking_update
                )
                return current.model_copy(update=update)

            result = await self.apply_transition(invitation_id, install)
            invitation = result.invitation
            if invitation is None:
                logfire.warn(
                    "Install for unknown invitation", invitation_id=str(invitation_id)
                )
                return result

            if invitation.status != InvitationStatus.INSTALLED:
                if result.changed:
                    logfire.info(
                        "Late install recorded without reward",
                        invitation_id=str(invitation_id),
                        expires_at=invitation.expires_at,
                    )
                return result

            if not result.changed:
                if invitation.tracking_data.reward_credited_at is not None:
                    return result
                # An earlier credit failed and released its claim
                claim = await self.apply_transition(
                    invitation_id, self._claim_reward(now)
                )
                if not claim.changed or claim.invitation is None:
                    return result
                invitation = claim.invitation

            reward = self.reward_calculator.install_award()
            await self._credit_install(invitation, reward)
            logfire.info(
                "Invitation installed",
                invitation_id=str(invitation_id),
                sender_id=invitation.sender_id,
                reward=reward,
            )
            return TransitionResult(
                invitation=invitation, changed=result.changed, reward=reward
            )

    @staticmethod
    def _claim_reward(now: datetime) -> Mutation:
        def claim(current: Invitation) -> Invitation | None:
            if (
                current.status != InvitationStatus.INSTALLED
                or current.tracking_data.reward_credited_at is not None
            ):
                return None
            return current.model_copy(
                update={
                    "tracking_data": current.tracking_data.model_copy(
                        update={"reward_credited_at": now}
                    ),
                    "version": current.version + 1,
                }
            )

        return claim

    async def _credit_install(self, invitation: Invitation, reward: int) -> None:
        """Credit a claimed install award, releasing the claim on failure."""
        try:
            await self.ledger_service.credit_install(invitation.sender_id, reward)
        except TimeoutError:
            # The write may have landed; releasing could pay twice
            logfire.error(
                "Install award outcome unknown; ledger must be reconciled",
                invitation_id=str(invitation.id),
                sender_id=invitation.sender_id,
                reward=reward,
            )
            raise
        except Exception as e:
            logfire.warn(
                "Install award credit failed; releasing claim",
                invitation_id=str(invitation.id),
                sender_id=invitation.sender_id,
                error=repr(e),
            )
            await self._release_reward_claim(invitation)
            raise

    async def _release_reward_claim(self, invitation: Invitation) -> None:
        claimed_at = invitation.tracking_data.reward_credited_at

        def release(current: Invitation) -> Invitation | None:
            if current.tracking_data.reward_credited_at != claimed_at:
                return None
            return current.model_copy(
                update={
                    "tracking_data": current.tracking_data.model_copy(
                        update={"reward_credited_at": None}
                    ),
                    "version": current.version + 1,
                }
            )

        try:
            await self.apply_transition(invitation.id, release)
        except Exception as e:
            logfire.error(
                "Releasing install award claim failed; ledger must be reconciled",
                invitation_id=str(invitation.id),
                sender_id=invitation.sender_id,
                error=repr(e),
            )
