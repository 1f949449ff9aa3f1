"""Accept invite use case."""

from uuid import UUID

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.collaborator.common import CollaboratorItem
from rolo.domain.service import CommunityService, InviteService
from rolo.domain.value import InviteToken, UserId


class AcceptInviteRequest(BaseModel):
    """Accept invite request."""

    user_id: str  # User ID from auth
    token: str  # From the accept deep link


class AcceptInviteResponse(BaseModel):
    """Accept invite response."""

    community_id: str
    community_handle: str
    community_name: str
    collaborator: CollaboratorItem


class AcceptInviteUseCase(BaseUseCase):
    """Use case behind the invite deep link.

    Redeems the token for the signed-in user. Unknown, used and expired tokens
    all look the same to the caller (not found).
    """

    def __init__(
        self, invite_service: InviteService, community_service: CommunityService
    ) -> None:
        self.invite_service = invite_service
        self.community_service = community_service

    async def execute(self, request: AcceptInviteRequest) -> AcceptInviteResponse:
        invite, collaborator = await self.invite_service.accept_invite(
            UserId(UUID(request.user_id)), InviteToken(request.token)
        )
        community = await self.community_service.get_by_id(invite.community_id)
        return AcceptInviteResponse(
            community_id=str(community.id),
            community_handle=community.handle.root,
            community_name=community.name,
            collaborator=CollaboratorItem.from_collaborator(collaborator),
        )
