"""Delete community use case."""

from uuid import UUID

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.domain.service import AccessControlService
from rolo.domain.value import CommunityId, UserId


class DeleteCommunityRequest(BaseModel):
    user_id: str
    community_id: str


class DeleteCommunityUseCase(BaseUseCase):
    """Delete a community with its collaborators, invites and subscription."""

    def __init__(self, access_control: AccessControlService) -> None:
        self.access_control = access_control

    async def execute(self, request: DeleteCommunityRequest) -> None:
        await self.access_control.delete_community(
            UserId(UUID(request.user_id)), CommunityId(UUID(request.community_id))
        )
