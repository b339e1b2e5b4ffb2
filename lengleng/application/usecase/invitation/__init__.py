"""Invitation use cases."""

from lengleng.application.usecase.invitation.expire_invitation import (
    ExpireInvitationRequest,
    ExpireInvitationResponse,
    ExpireInvitationUseCase,
    SweepExpiredRequest,
    SweepExpiredResponse,
    SweepExpiredUseCase,
)
from lengleng.application.usecase.invitation.get_invitations import (
    GetInvitationsRequest,
    GetInvitationsResponse,
    GetInvitationsUseCase,
)
from lengleng.application.usecase.invitation.send_invite import (
    SendInviteRequest,
    SendInviteResponse,
    SendInviteUseCase,
)
from lengleng.application.usecase.invitation.send_reminder import (
    SendReminderRequest,
    SendReminderResponse,
    SendReminderUseCase,
    SendRemindersRequest,
    SendRemindersResponse,
    SendRemindersUseCase,
)
from lengleng.application.usecase.invitation.track_invitation import (
    TrackInvitationClickUseCase,
    TrackInvitationInstallUseCase,
    TrackInvitationRequest,
    TrackInvitationResponse,
)

__all__ = [
    "ExpireInvitationRequest",
    "ExpireInvitationResponse",
    "ExpireInvitationUseCase",
    "GetInvitationsRequest",
    "GetInvitationsResponse",
    "GetInvitationsUseCase",
    "SendInviteRequest",
    "SendInviteResponse",
    "SendInviteUseCase",
    "SendReminderRequest",
    "SendReminderResponse",
    "SendReminderUseCase",
    "SendRemindersRequest",
    "SendRemindersResponse",
    "SendRemindersUseCase",
    "SweepExpiredRequest",
    "SweepExpiredResponse",
    "SweepExpiredUseCase",
    "TrackInvitationClickUseCase",
    "TrackInvitationInstallUseCase",
    "TrackInvitationRequest",
    "TrackInvitationResponse",
]
