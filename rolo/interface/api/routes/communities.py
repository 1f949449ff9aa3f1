"""Community routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, Response, status
from pydantic import BaseModel, Field

from rolo.application.usecase.community import (
    CheckHandleRequest,
    CheckHandleResponse,
    CheckHandleUseCase,
    CommunityItem,
    CreateCommunityRequest,
    CreateCommunityResponse,
    CreateCommunityUseCase,
    DeleteCommunityRequest,
    DeleteCommunityUseCase,
    InviteeInfo,
    RequestJoinRequest,
    RequestJoinUseCase,
    UpdateCommunityRequest,
    UpdateCommunityUseCase,
)
from rolo.application.usecase.collaborator import CollaboratorItem
from rolo.domain.service import IdentityService
from rolo.interface.api.auth import authenticate

router = APIRouter(prefix="/communities", tags=["communities"], route_class=DishkaRoute)


class CreateCommunityAPIRequest(BaseModel):
    """API request for creating a community."""

    handle: str = Field(min_length=3, max_length=63)
    name: str = Field(min_length=1, max_length=255)
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


class UpdateCommunityAPIRequest(BaseModel):
    """API request for updating a community; omitted fields are unchanged."""

    handle: str | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = None
    phone_number: str | None = None
    tax_id: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    logo_url: str | None = None


class JoinCommunityAPIRequest(BaseModel):
    handle: str


@router.post(
    "", response_model=CreateCommunityResponse, status_code=status.HTTP_201_CREATED
)
async def create_community(
    request: CreateCommunityAPIRequest,
    create_community_use_case: FromDishka[CreateCommunityUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> CreateCommunityResponse:
    """Create a community owned by the caller.

    Invitees are invited best-effort; failures are listed in the response.
    """
    user_id = await authenticate(identity_service, authorization)
    return await create_community_use_case.execute(
        CreateCommunityRequest(creator_id=user_id, **request.model_dump())
    )


@router.get("/handles/{handle}/availability", response_model=CheckHandleResponse)
async def check_handle_availability(
    handle: str,
    check_handle_use_case: FromDishka[CheckHandleUseCase],
) -> CheckHandleResponse:
    """Check whether a handle can be used for a new community."""
    return await check_handle_use_case.execute(CheckHandleRequest(handle=handle))


@router.post(
    "/join", response_model=CollaboratorItem, status_code=status.HTTP_201_CREATED
)
async def join_community(
    request: JoinCommunityAPIRequest,
    request_join_use_case: FromDishka[RequestJoinUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> CollaboratorItem:
    """Ask to join a community; an owner or admin must approve."""
    user_id = await authenticate(identity_service, authorization)
    return await request_join_use_case.execute(
        RequestJoinRequest(user_id=user_id, handle=request.handle)
    )


@router.patch("/{community_id}", response_model=CommunityItem)
async def update_community(
    community_id: UUID,
    request: UpdateCommunityAPIRequest,
    update_community_use_case: FromDishka[UpdateCommunityUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> CommunityItem:
    """Update community details (owner or admin)."""
    user_id = await authenticate(identity_service, authorization)
    return await update_community_use_case.execute(
        UpdateCommunityRequest(
            user_id=user_id,
            community_id=str(community_id),
            **request.model_dump(exclude_unset=True),
        )
    )


@router.delete("/{community_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_community(
    community_id: UUID,
    delete_community_use_case: FromDishka[DeleteCommunityUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> Response:
    """Delete a community and everything in it (owner only)."""
    user_id = await authenticate(identity_service, authorization)
    await delete_community_use_case.execute(
        DeleteCommunityRequest(user_id=user_id, community_id=str(community_id))
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
