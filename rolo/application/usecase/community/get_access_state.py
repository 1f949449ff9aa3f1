"""Get access state use case."""

from uuid import UUID

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.domain.service import AccessControlService
from rolo.domain.value import CollaboratorStatus, Role, UserId


class GetAccessStateRequest(BaseModel):
    user_id: str


class MembershipItem(BaseModel):
    """One community the user belongs to or asked to join."""

    community_id: str
    handle: str
    name: str
    role: Role
    status: CollaboratorStatus


class GetAccessStateResponse(BaseModel):
    """Access state of the current user."""

    user_id: str
    has_access: bool
    memberships: list[MembershipItem]


class GetAccessStateUseCase(BaseUseCase):
    """Use case for deciding where a signed-in user lands.

    Users without an approved membership are sent to create or join a
    community; pending requests are listed so the UI can show them.
    """

    def __init__(self, access_control: AccessControlService) -> None:
        self.access_control = access_control

    async def execute(self, request: GetAccessStateRequest) -> GetAccessStateResponse:
        state = await self.access_control.access_state(UserId(UUID(request.user_id)))
        return GetAccessStateResponse(
            user_id=str(state.user_id),
            has_access=state.has_access,
            memberships=[
                MembershipItem(
                    community_id=str(m.community_id),
                    handle=m.handle.root,
                    name=m.name,
                    role=m.role,
                    status=m.status,
                )
                for m in state.memberships
            ],
        )
