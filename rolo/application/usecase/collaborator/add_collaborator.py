"""Add collaborator use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.collaborator.common import CollaboratorItem
from rolo.domain.service import MANAGER_ROLES, AccessControlService
from rolo.domain.value import CollaboratorStatus, CommunityId, Role, UserId


class AddCollaboratorRequest(BaseModel):
    """Add collaborator request."""

    acting_user_id: str  # User ID from auth
    community_id: str
    user_id: str  # User being added
    role: Role = Role.VIEWER
    status: CollaboratorStatus = CollaboratorStatus.APPROVED


class AddCollaboratorUseCase(BaseUseCase):
    """Use case for granting a membership directly (owner or admin)."""

    def __init__(self, access_control: AccessControlService) -> None:
        self.access_control = access_control

    async def execute(self, request: AddCollaboratorRequest) -> CollaboratorItem:
        """Execute add collaborator use case.

        Args:
            request: Add collaborator request

        Returns:
            Created membership

        Raises:
            ForbiddenError: If the acting user is not owner or admin
            ConflictError: If the user already has a membership row
            SeatLimitExceededError: If the plan has no free seat for the role
        """
        acting_user_id = UserId(UUID(request.acting_user_id))
        community_id = CommunityId(UUID(request.community_id))

        with logfire.span(
            "add_collaborator",
            acting_user_id=str(acting_user_id),
            community_id=str(community_id),
        ):
            await self.access_control.authorize(
                acting_user_id, community_id, MANAGER_ROLES
            )
            collaborator = await self.access_control.add_collaborator(
                acting_user_id,
                UserId(UUID(request.user_id)),
                community_id,
                request.role,
                request.status,
            )
            return CollaboratorItem.from_collaborator(collaborator)
