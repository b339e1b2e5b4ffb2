"""Notifications handed to the delivery transport.

Each kind is its own model carrying only the fields it needs; the
``Notification`` union is discriminated by ``kind`` so a serialized
notification round-trips to the right class.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import Field

from lengleng.domain.model.common import DomainModel
from lengleng.domain.value import InvitationId, UserId


class InvitationMessage(DomainModel):
    """The initial invite SMS to the recipient."""

    kind: Literal["invitation_message"] = "invitation_message"
    recipient_phone: str
    body: str


class InvitationReminder(DomainModel):
    """Reminder SMS to a recipient who has not installed yet."""

    kind: Literal["invitation_reminder"] = "invitation_reminder"
    invitation_id: InvitationId
    recipient_phone: str
    body: str
    fire_at: datetime


class InviteExpiringNudge(DomainModel):
    """Push to the sender shortly before an invitation expires."""

    kind: Literal["invite_expiring"] = "invite_expiring"
    sender_id: UserId
    invitation_id: InvitationId
    title: str
    body: str
    fire_at: datetime


Notification = Annotated[
    Union[InvitationMessage, InvitationReminder, InviteExpiringNudge],
    Field(discriminator="kind"),
]
