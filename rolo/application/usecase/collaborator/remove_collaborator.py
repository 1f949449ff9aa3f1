"""Remove collaborator use case."""

from uuid import UUID

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.domain.service import AccessControlService
from rolo.domain.value import CommunityId, UserId


class RemoveCollaboratorRequest(BaseModel):
    acting_user_id: str
    community_id: str
    user_id: str


class RemoveCollaboratorUseCase(BaseUseCase):
    """Remove a member, or leave a community when removing oneself."""

    def __init__(self, access_control: AccessControlService) -> None:
        self.access_control = access_control

    async def execute(self, request: RemoveCollaboratorRequest) -> None:
        await self.access_control.remove_collaborator(
            UserId(UUID(request.acting_user_id)),
            CommunityId(UUID(request.community_id)),
            UserId(UUID(request.user_id)),
        )
