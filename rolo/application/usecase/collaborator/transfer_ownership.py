"""Transfer ownership use case."""

from uuid import UUID

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.collaborator.common import CollaboratorItem
from rolo.domain.service import AccessControlService
from rolo.domain.value import CommunityId, UserId


class TransferOwnershipRequest(BaseModel):
    acting_user_id: str
    community_id: str
    new_owner_id: str


class TransferOwnershipResponse(BaseModel):
    owner: CollaboratorItem
    previous_owner: CollaboratorItem


class TransferOwnershipUseCase(BaseUseCase):
    """Hand the community to another approved member."""

    def __init__(self, access_control: AccessControlService) -> None:
        self.access_control = access_control

    async def execute(
        self, request: TransferOwnershipRequest
    ) -> TransferOwnershipResponse:
        owner, previous = await self.access_control.transfer_ownership(
            UserId(UUID(request.acting_user_id)),
            CommunityId(UUID(request.community_id)),
            UserId(UUID(request.new_owner_id)),
        )
        return TransferOwnershipResponse(
            owner=CollaboratorItem.from_collaborator(owner),
            previous_owner=CollaboratorItem.from_collaborator(previous),
        )
