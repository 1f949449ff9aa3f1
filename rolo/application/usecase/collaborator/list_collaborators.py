"""List collaborators use case."""

from uuid import UUID

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.collaborator.common import CollaboratorItem
from rolo.domain.service import AccessControlService
from rolo.domain.value import CollaboratorStatus, CommunityId, UserId


class ListCollaboratorsRequest(BaseModel):
    """List collaborators request."""

    user_id: str  # User ID from auth
    community_id: str
    status: CollaboratorStatus | None = None


class ListCollaboratorsResponse(BaseModel):
    collaborators: list[CollaboratorItem]
    total: int


class ListCollaboratorsUseCase(BaseUseCase):
    """Use case for listing the members of a community.

    Any approved member may list; pending and rejected users may not.
    """

    def __init__(self, access_control: AccessControlService) -> None:
        self.access_control = access_control

    async def execute(
        self, request: ListCollaboratorsRequest
    ) -> ListCollaboratorsResponse:
        collaborators = await self.access_control.list_collaborators(
            UserId(UUID(request.user_id)),
            CommunityId(UUID(request.community_id)),
            request.status,
        )
        items = [CollaboratorItem.from_collaborator(c) for c in collaborators]
        return ListCollaboratorsResponse(collaborators=items, total=len(items))
