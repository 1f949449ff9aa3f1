"""Request to join a community use case."""

from uuid import UUID

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.collaborator.common import CollaboratorItem
from rolo.domain.service import AccessControlService
from rolo.domain.value import CommunityHandle, UserId


class RequestJoinRequest(BaseModel):
    """Join request for a community, addressed by handle."""

    user_id: str
    handle: str


class RequestJoinUseCase(BaseUseCase):
    """Create a pending viewer membership for the caller."""

    def __init__(self, access_control: AccessControlService) -> None:
        self.access_control = access_control

    async def execute(self, request: RequestJoinRequest) -> CollaboratorItem:
        collaborator = await self.access_control.request_join(
            UserId(UUID(request.user_id)), CommunityHandle(request.handle)
        )
        return CollaboratorItem.from_collaborator(collaborator)
