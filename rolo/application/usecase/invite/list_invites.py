"""List invites use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.invite.common import InviteItem
from rolo.config import Settings
from rolo.domain.service import MANAGER_ROLES, AccessControlService, InviteService
from rolo.domain.value import CommunityId, InviteStatus, UserId


class ListInvitesRequest(BaseModel):
    """List invites request."""

    user_id: str  # User ID from auth
    community_id: str
    status: InviteStatus | None = None
    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ListInvitesResponse(BaseModel):
    """List invites response."""

    invites: list[InviteItem]
    total: int


class ListInvitesUseCase(BaseUseCase):
    """Use case for listing a community's invites (owner or admin)."""

    def __init__(
        self,
        access_control: AccessControlService,
        invite_service: InviteService,
        settings: Settings,
    ) -> None:
        self.access_control = access_control
        self.invite_service = invite_service
        self.settings = settings

    async def execute(self, request: ListInvitesRequest) -> ListInvitesResponse:
        user_id = UserId(UUID(request.user_id))
        community_id = CommunityId(UUID(request.community_id))
        await self.access_control.authorize(user_id, community_id, MANAGER_ROLES)

        invites = await self.invite_service.list_invites(
            community_id,
            status=request.status,
            limit=request.limit,
            offset=request.offset,
        )

        frontend_url = self.settings.api.frontend_url
        items = [InviteItem.from_invite(invite, frontend_url) for invite in invites]
        return ListInvitesResponse(invites=items, total=len(items))
