"""Invite message composition."""

import random
from datetime import datetime

from lengleng.domain.value import Contact, InvitationId, MessageVariant

from .base import Service

_STANDARD_TEMPLATES = (
    "Someone at {school} picked you on LengLeng \U0001f525 Find out who!",
    "{count} people from {school} have rated you on LengLeng. See what they said!",
    "Someone thinks you're \U0001f451 at {school}. Find out who on LengLeng!",
    "Your crush might be waiting for you on LengLeng \U0001f440",
)

_TIME_BASED_TEMPLATES = (
    "Someone at {school} picked you on LengLeng this {period} \U0001f525 Find out who!",
    "{count} people from {school} rated you on LengLeng this {period}. See what they said!",
    "This {period} someone thought you're \U0001f451 at {school}. Find out who on LengLeng!",
)


class MessageComposer(Service):
    """Builds invite texts and the deep link they carry."""

    def __init__(self, invite_link_base_url: str, rng: random.Random | None = None):
        self.invite_link_base_url = invite_link_base_url.rstrip("/")
        self.rng = rng or random.Random()

    @staticmethod
    def determine_variant(now: datetime) -> MessageVariant:
        """Pick the template family for the sender's local time.

        Mornings and afternoons (05:00-17:00) use time-based copy.
        """
        if 5 <= now.hour < 17:
            return MessageVariant.TIME_BASED
        return MessageVariant.STANDARD

    def compose(self, contact: Contact, variant: MessageVariant, now: datetime) -> str:
        """Draw a template of the given family and fill it in for a contact."""
        templates = (
            _TIME_BASED_TEMPLATES
            if variant == MessageVariant.TIME_BASED
            else _STANDARD_TEMPLATES
        )
        template = self.rng.choice(templates)
        return template.format(
            school=contact.school or "your school",
            count=self.rng.randint(3, 8),
            period="morning" if now.hour < 12 else "afternoon",
        )

    def invite_link(self, invitation_id: InvitationId) -> str:
        """Deep link whose click/install callbacks carry the invitation ID."""
        return f"{self.invite_link_base_url}/{invitation_id}"

    def with_link(self, message: str, invitation_id: InvitationId) -> str:
        """Full SMS body: message followed by the invite link."""
        return f"{message}\n\n{self.invite_link(invitation_id)}"
