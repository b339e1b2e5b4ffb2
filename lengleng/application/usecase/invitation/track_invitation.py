"""Track invitation use cases (deep-link callbacks)."""

import logfire
from pydantic import BaseModel

from lengleng.application.usecase.base import BaseUseCase
from lengleng.domain.model import Invitation
from lengleng.domain.service import InvitationService
from lengleng.domain.value import parse_invitation_id


class TrackInvitationRequest(BaseModel):
    """Click or install event for an invitation."""

    invitation_id: str  # UUID string from the deep link


class TrackInvitationResponse(BaseModel):
    """Outcome of a tracking event."""

    found: bool
    invitation: Invitation | None = None
    changed: bool = False  # False for replayed or stale events
    reward: int = 0


class TrackInvitationClickUseCase(BaseUseCase):
    """Use case for the invite link being opened.

    Callbacks are untrusted and may be replayed, so malformed or unknown
    IDs are reported as not found instead of raising.
    """

    def __init__(self, invitation_service: InvitationService) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation lifecycle service
        """
        self.invitation_service = invitation_service

    async def execute(self, request: TrackInvitationRequest) -> TrackInvitationResponse:
        """Record a click.

        Args:
            request: Tracking request

        Returns:
            Tracking response
        """
        with logfire.span("track_click.execute", invitation_id=request.invitation_id):
            invitation_id = parse_invitation_id(request.invitation_id)
            if invitation_id is None:
                logfire.warn("Malformed invitation ID", raw=request.invitation_id)
                return TrackInvitationResponse(found=False)

            result = await self.invitation_service.mark_clicked(invitation_id)
            return TrackInvitationResponse(
                found=result.invitation is not None,
                invitation=result.invitation,
                changed=result.changed,
            )


class TrackInvitationInstallUseCase(BaseUseCase):
    """Use case for the recipient installing the app from an invite."""

    def __init__(self, invitation_service: InvitationService) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation lifecycle service
        """
        self.invitation_service = invitation_service

    async def execute(self, request: TrackInvitationRequest) -> TrackInvitationResponse:
        """Record an install, crediting the sender on the first one.

        Args:
            request: Tracking request

        Returns:
            Tracking response with the credited reward
        """
        with logfire.span(
            "track_install.execute", invitation_id=request.invitation_id
        ):
            invitation_id = parse_invitation_id(request.invitation_id)
            if invitation_id is None:
                logfire.warn("Malformed invitation ID", raw=request.invitation_id)
                return TrackInvitationResponse(found=False)

            result = await self.invitation_service.mark_installed(invitation_id)
            return TrackInvitationResponse(
                found=result.invitation is not None,
                invitation=result.invitation,
                changed=result.changed,
                reward=result.reward,
            )
