"""Validate invite use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.domain.model import InviteValidity
from rolo.domain.service import CommunityService, InviteService
from rolo.domain.value import InviteToken, Role

_MESSAGES = {
    InviteValidity.NOT_FOUND: "Invite not found",
    InviteValidity.ACCEPTED: "Invite has already been accepted",
    InviteValidity.EXPIRED: "Invite has expired",
}


class ValidateInviteRequest(BaseModel):
    """Validate invite request."""

    token: str


class ValidateInviteResponse(BaseModel):
    """Validate invite response."""

    valid: bool
    status: InviteValidity
    community_handle: str | None = None
    community_name: str | None = None
    role: Role | None = None
    expires_at: datetime | None = None
    message: str | None = None


class ValidateInviteUseCase(BaseUseCase):
    """Use case for validating an invite token.

    This allows the frontend to check if an invite link is valid
    before asking the user to sign in.
    """

    def __init__(
        self, invite_service: InviteService, community_service: CommunityService
    ) -> None:
        """Initialize validate invite use case.

        Args:
            invite_service: Invite domain service
            community_service: Community domain service
        """
        self.invite_service = invite_service
        self.community_service = community_service

    async def execute(self, request: ValidateInviteRequest) -> ValidateInviteResponse:
        """Validate an invite token.

        Args:
            request: Validation request with token

        Returns:
            Validation response with invite details or the reason it is unusable
        """
        with logfire.span("validate_invite.execute", token=request.token[:8] + "..."):
            validity, invite = await self.invite_service.validate_invite(
                InviteToken(request.token)
            )
            if validity is not InviteValidity.VALID or invite is None:
                logfire.info(
                    "Invite not valid",
                    token=request.token[:8] + "...",
                    status=validity.value,
                )
                return ValidateInviteResponse(
                    valid=False, status=validity, message=_MESSAGES.get(validity)
                )

            community = await self.community_service.find(invite.community_id)
            if community is None:
                return ValidateInviteResponse(
                    valid=False,
                    status=InviteValidity.NOT_FOUND,
                    message=_MESSAGES[InviteValidity.NOT_FOUND],
                )

            return ValidateInviteResponse(
                valid=True,
                status=validity,
                community_handle=community.handle.root,
                community_name=community.name,
                role=invite.role,
                expires_at=invite.expires_at,
            )
