"""Invite routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, Query, status
from pydantic import BaseModel

from rolo.application.usecase.invite import (
    AcceptInviteRequest,
    AcceptInviteResponse,
    AcceptInviteUseCase,
    InviteItem,
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
    SendInviteRequest,
    SendInviteUseCase,
    ValidateInviteRequest,
    ValidateInviteResponse,
    ValidateInviteUseCase,
)
from rolo.domain.service import IdentityService
from rolo.domain.value import InviteStatus, Role
from rolo.interface.api.auth import authenticate

router = APIRouter(tags=["invites"], route_class=DishkaRoute)


class SendInviteAPIRequest(BaseModel):
    """API request for inviting someone by email."""

    email: str
    role: Role = Role.VIEWER


@router.post(
    "/communities/{community_id}/invites",
    response_model=InviteItem,
    status_code=status.HTTP_201_CREATED,
)
async def send_invite(
    community_id: UUID,
    request: SendInviteAPIRequest,
    send_invite_use_case: FromDishka[SendInviteUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> InviteItem:
    """Invite someone to the community (owner or admin).

    The invite is created even if the email cannot be sent; check
    ``email_sent`` and share ``invite_url`` another way if needed.
    """
    user_id = await authenticate(identity_service, authorization)
    return await send_invite_use_case.execute(
        SendInviteRequest(
            inviter_id=user_id,
            community_id=str(community_id),
            email=request.email,
            role=request.role,
        )
    )


@router.get("/communities/{community_id}/invites", response_model=ListInvitesResponse)
async def list_invites(
    community_id: UUID,
    list_invites_use_case: FromDishka[ListInvitesUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
    status_filter: InviteStatus | None = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ListInvitesResponse:
    """List a community's invites (owner or admin).

    Args:
        community_id: Community to list
        status_filter: Optional status filter (pending, accepted, expired)
        limit: Maximum number of results (1-100)
        offset: Number of results to skip
    """
    user_id = await authenticate(identity_service, authorization)
    return await list_invites_use_case.execute(
        ListInvitesRequest(
            user_id=user_id,
            community_id=str(community_id),
            status=status_filter,
            limit=limit,
            offset=offset,
        )
    )


@router.get("/invites/validate", response_model=ValidateInviteResponse)
async def validate_invite(
    validate_invite_use_case: FromDishka[ValidateInviteUseCase],
    token: str = Query(min_length=1, max_length=255),
) -> ValidateInviteResponse:
    """Check an invite link before asking the user to sign in. No auth needed."""
    return await validate_invite_use_case.execute(ValidateInviteRequest(token=token))


@router.post("/invites/accept", response_model=AcceptInviteResponse)
async def accept_invite(
    accept_invite_use_case: FromDishka[AcceptInviteUseCase],
    identity_service: FromDishka[IdentityService],
    token: str = Query(min_length=1, max_length=255),
    authorization: str | None = Header(default=None),
) -> AcceptInviteResponse:
    """Redeem an invite for the signed-in user (target of the email deep link).

    Unknown, already used and expired tokens all answer 404.
    """
    user_id = await authenticate(identity_service, authorization)
    return await accept_invite_use_case.execute(
        AcceptInviteRequest(user_id=user_id, token=token)
    )
