"""Create community use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.collaborator.common import CollaboratorItem
from rolo.application.usecase.community.common import CommunityItem
from rolo.application.usecase.invite.common import InviteItem
from rolo.config import Settings
from rolo.domain.error import DomainError, ValidationError
from rolo.domain.model import CommunityDetails
from rolo.domain.service import (
    AccessControlService,
    InviteService,
    NotificationService,
)
from rolo.domain.value import EmailAddress, Role, UserId


class InviteeInfo(BaseModel):
    """Someone to invite while creating the community."""

    email: str
    role: Role = Role.VIEWER


class CreateCommunityRequest(BaseModel):
    """Create community request."""

    creator_id: str  # User ID from auth
    handle: str
    name: str
    email: str
    phone_number: str
    tax_id: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    logo_url: str | None = None
    invitees: list[InviteeInfo] = Field(default_factory=list)


class CreateCommunityResponse(BaseModel):
    """Create community response."""

    community: CommunityItem
    owner: CollaboratorItem
    invites: list[InviteItem]
    failed_invitees: list[str]  # Emails that could not be invited or notified


class CreateCommunityUseCase(BaseUseCase):
    """Create a community owned by the caller, then invite the initial members.

    Invites are best-effort: each failure is reported in ``failed_invitees``
    and never fails the creation itself.
    """

    def __init__(
        self,
        access_control: AccessControlService,
        invite_service: InviteService,
        notification_service: NotificationService,
        settings: Settings,
    ) -> None:
        """Initialize use case.

        Args:
            access_control: Access control domain service
            invite_service: Invite domain service
            notification_service: Notification domain service
            settings: Application settings
        """
        self.access_control = access_control
        self.invite_service = invite_service
        self.notification_service = notification_service
        self.settings = settings

    async def execute(self, request: CreateCommunityRequest) -> CreateCommunityResponse:
        """Execute create community use case.

        Args:
            request: Create community request

        Returns:
            Created community, its owner, sent invites and failed invitees

        Raises:
            ValidationError: If too many invitees are given
            ConflictError: If the handle is taken
        """
        creator_id = UserId(UUID(request.creator_id))
        max_invitees = self.settings.invitations.max_invitees_per_community
        if len(request.invitees) > max_invitees:
            raise ValidationError(
                f"At most {max_invitees} invitees can be added at creation"
            )

        with logfire.span(
            "create_community",
            creator_id=str(creator_id),
            handle=request.handle,
            invitee_count=len(request.invitees),
        ):
            details = CommunityDetails(
                **request.model_dump(exclude={"creator_id", "invitees"})
            )
            community, owner = await self.access_control.create_community(
                creator_id, details
            )

            invites: list[InviteItem] = []
            failed_invitees: list[str] = []
            frontend_url = self.settings.api.frontend_url

            for invitee in request.invitees:
                try:
                    invite = await self.invite_service.send_invite(
                        creator_id,
                        community.id,
                        EmailAddress(invitee.email),
                        invitee.role,
                    )
                except (DomainError, PydanticValidationError) as e:
                    failed_invitees.append(invitee.email)
                    logfire.warn(
                        "Failed to create invite",
                        community_id=str(community.id),
                        error=str(e),
                    )
                    continue

                sent = await self.notification_service.notify_invite(
                    invite, community.name
                )
                if not sent:
                    failed_invitees.append(invitee.email)
                invites.append(InviteItem.from_invite(invite, frontend_url, sent))

            return CreateCommunityResponse(
                community=CommunityItem.from_community(community),
                owner=CollaboratorItem.from_collaborator(owner),
                invites=invites,
                failed_invitees=failed_invitees,
            )
