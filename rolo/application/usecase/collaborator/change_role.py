"""Change collaborator role use case."""

from uuid import UUID

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.collaborator.common import CollaboratorItem
from rolo.domain.service import AccessControlService
from rolo.domain.value import CommunityId, Role, UserId


class ChangeRoleRequest(BaseModel):
    acting_user_id: str
    community_id: str
    user_id: str
    role: Role


class ChangeRoleUseCase(BaseUseCase):
    """Use case for changing an approved member's role."""

    def __init__(self, access_control: AccessControlService) -> None:
        self.access_control = access_control

    async def execute(self, request: ChangeRoleRequest) -> CollaboratorItem:
        collaborator = await self.access_control.change_role(
            UserId(UUID(request.acting_user_id)),
            CommunityId(UUID(request.community_id)),
            UserId(UUID(request.user_id)),
            request.role,
        )
        return CollaboratorItem.from_collaborator(collaborator)
