"""Send invite use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.invite.common import InviteItem
from rolo.config import Settings
from rolo.domain.service import (
    MANAGER_ROLES,
    AccessControlService,
    CommunityService,
    InviteService,
    NotificationService,
)
from rolo.domain.value import CommunityId, EmailAddress, Role, UserId


class SendInviteRequest(BaseModel):
    """Send invite request."""

    inviter_id: str  # User ID from auth
    community_id: str
    email: str
    role: Role = Role.VIEWER


class SendInviteUseCase(BaseUseCase):
    """Use case for inviting someone to a community by email."""

    def __init__(
        self,
        access_control: AccessControlService,
        community_service: CommunityService,
        invite_service: InviteService,
        notification_service: NotificationService,
        settings: Settings,
    ) -> None:
        """Initialize use case.

        Args:
            access_control: Access control domain service
            community_service: Community domain service
            invite_service: Invite domain service
            notification_service: Notification domain service
            settings: Application settings
        """
        self.access_control = access_control
        self.community_service = community_service
        self.invite_service = invite_service
        self.notification_service = notification_service
        self.settings = settings

    async def execute(self, request: SendInviteRequest) -> InviteItem:
        """Create the invite, then email it.

        The invite stands even when the email cannot be sent; ``email_sent``
        tells the caller to share the link another way.

        Raises:
            ForbiddenError: If the inviter is not owner or admin
            ConflictError: If a pending invite exists for the email
        """
        inviter_id = UserId(UUID(request.inviter_id))
        community_id = CommunityId(UUID(request.community_id))

        with logfire.span(
            "send_invite",
            inviter_id=str(inviter_id),
            community_id=str(community_id),
            role=request.role.value,
        ):
            await self.access_control.authorize(inviter_id, community_id, MANAGER_ROLES)
            community = await self.community_service.get_by_id(community_id)

            invite = await self.invite_service.send_invite(
                inviter_id, community_id, EmailAddress(request.email), request.role
            )
            sent = await self.notification_service.notify_invite(invite, community.name)
            return InviteItem.from_invite(invite, self.settings.api.frontend_url, sent)
