"""Review join request use case."""

from uuid import UUID

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.collaborator.common import CollaboratorItem
from rolo.domain.service import AccessControlService
from rolo.domain.value import CommunityId, Role, UserId


class ReviewCollaboratorRequest(BaseModel):
    """Approve or reject a pending join request."""

    acting_user_id: str
    community_id: str
    user_id: str
    approve: bool
    role: Role | None = None  # Role to approve with; defaults to the requested one


class ReviewCollaboratorUseCase(BaseUseCase):
    """Use case for owners and admins deciding on join requests."""

    def __init__(self, access_control: AccessControlService) -> None:
        self.access_control = access_control

    async def execute(self, request: ReviewCollaboratorRequest) -> CollaboratorItem:
        collaborator = await self.access_control.review_collaborator(
            UserId(UUID(request.acting_user_id)),
            CommunityId(UUID(request.community_id)),
            UserId(UUID(request.user_id)),
            approve=request.approve,
            role=request.role,
        )
        return CollaboratorItem.from_collaborator(collaborator)
