"""Update community use case."""

from uuid import UUID

from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.community.common import CommunityItem
from rolo.domain.model import CommunityUpdate
from rolo.domain.service import AccessControlService
from rolo.domain.value import CommunityId, UserId


class UpdateCommunityRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    user_id: str
    community_id: str
    handle: str | None = None
    name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    tax_id: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    logo_url: str | None = None


class UpdateCommunityUseCase(BaseUseCase):
    """Use case for editing community details (owner or admin)."""

    def __init__(self, access_control: AccessControlService) -> None:
        self.access_control = access_control

    async def execute(self, request: UpdateCommunityRequest) -> CommunityItem:
        """Execute update community use case.

        Args:
            request: Fields to change

        Returns:
            Updated community
        """
        update = CommunityUpdate(
            **request.model_dump(
                exclude={"user_id", "community_id"}, exclude_unset=True
            )
        )
        community = await self.access_control.update_community(
            UserId(UUID(request.user_id)),
            CommunityId(UUID(request.community_id)),
            update,
        )
        return CommunityItem.from_community(community)
