"""Collaborator routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, Query, Response, status
from pydantic import BaseModel

from rolo.application.usecase.collaborator import (
    AddCollaboratorRequest,
    AddCollaboratorUseCase,
    ChangeRoleRequest,
    ChangeRoleUseCase,
    CollaboratorItem,
    ListCollaboratorsRequest,
    ListCollaboratorsResponse,
    ListCollaboratorsUseCase,
    RemoveCollaboratorRequest,
    RemoveCollaboratorUseCase,
    ReviewCollaboratorRequest,
    ReviewCollaboratorUseCase,
    TransferOwnershipRequest,
    TransferOwnershipResponse,
    TransferOwnershipUseCase,
)
from rolo.domain.service import IdentityService
from rolo.domain.value import CollaboratorStatus, Role
from rolo.interface.api.auth import authenticate

router = APIRouter(
    prefix="/communities/{community_id}",
    tags=["collaborators"],
    route_class=DishkaRoute,
)


class AddCollaboratorAPIRequest(BaseModel):
    """API request for adding a collaborator directly."""

    user_id: UUID
    role: Role = Role.VIEWER
    status: CollaboratorStatus = CollaboratorStatus.APPROVED


class ReviewAPIRequest(BaseModel):
    approve: bool
    role: Role | None = None


class ChangeRoleAPIRequest(BaseModel):
    role: Role


class TransferOwnershipAPIRequest(BaseModel):
    new_owner_id: UUID


@router.get("/collaborators", response_model=ListCollaboratorsResponse)
async def list_collaborators(
    community_id: UUID,
    list_collaborators_use_case: FromDishka[ListCollaboratorsUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
    status_filter: CollaboratorStatus | None = Query(default=None, alias="status"),
) -> ListCollaboratorsResponse:
    """List the members of a community (any approved member)."""
    user_id = await authenticate(identity_service, authorization)
    return await list_collaborators_use_case.execute(
        ListCollaboratorsRequest(
            user_id=user_id, community_id=str(community_id), status=status_filter
        )
    )


@router.post(
    "/collaborators",
    response_model=CollaboratorItem,
    status_code=status.HTTP_201_CREATED,
)
async def add_collaborator(
    community_id: UUID,
    request: AddCollaboratorAPIRequest,
    add_collaborator_use_case: FromDishka[AddCollaboratorUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> CollaboratorItem:
    """Grant a membership directly (owner or admin).

    Approved grants need a free seat of the role's class.
    """
    user_id = await authenticate(identity_service, authorization)
    return await add_collaborator_use_case.execute(
        AddCollaboratorRequest(
            acting_user_id=user_id,
            community_id=str(community_id),
            user_id=str(request.user_id),
            role=request.role,
            status=request.status,
        )
    )


@router.post("/collaborators/{user_id}/review", response_model=CollaboratorItem)
async def review_collaborator(
    community_id: UUID,
    user_id: UUID,
    request: ReviewAPIRequest,
    review_collaborator_use_case: FromDishka[ReviewCollaboratorUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> CollaboratorItem:
    """Approve or reject a pending join request (owner or admin)."""
    acting_user_id = await authenticate(identity_service, authorization)
    return await review_collaborator_use_case.execute(
        ReviewCollaboratorRequest(
            acting_user_id=acting_user_id,
            community_id=str(community_id),
            user_id=str(user_id),
            approve=request.approve,
            role=request.role,
        )
    )


@router.patch("/collaborators/{user_id}/role", response_model=CollaboratorItem)
async def change_role(
    community_id: UUID,
    user_id: UUID,
    request: ChangeRoleAPIRequest,
    change_role_use_case: FromDishka[ChangeRoleUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> CollaboratorItem:
    """Change an approved member's role (owner or admin)."""
    acting_user_id = await authenticate(identity_service, authorization)
    return await change_role_use_case.execute(
        ChangeRoleRequest(
            acting_user_id=acting_user_id,
            community_id=str(community_id),
            user_id=str(user_id),
            role=request.role,
        )
    )


@router.delete("/collaborators/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_collaborator(
    community_id: UUID,
    user_id: UUID,
    remove_collaborator_use_case: FromDishka[RemoveCollaboratorUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> Response:
    """Remove a member, or leave the community when removing yourself."""
    acting_user_id = await authenticate(identity_service, authorization)
    await remove_collaborator_use_case.execute(
        RemoveCollaboratorRequest(
            acting_user_id=acting_user_id,
            community_id=str(community_id),
            user_id=str(user_id),
        )
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/ownership", response_model=TransferOwnershipResponse)
async def transfer_ownership(
    community_id: UUID,
    request: TransferOwnershipAPIRequest,
    transfer_ownership_use_case: FromDishka[TransferOwnershipUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> TransferOwnershipResponse:
    """Hand ownership to another approved member (owner only)."""
    acting_user_id = await authenticate(identity_service, authorization)
    return await transfer_ownership_use_case.execute(
        TransferOwnershipRequest(
            acting_user_id=acting_user_id,
            community_id=str(community_id),
            new_owner_id=str(request.new_owner_id),
        )
    )
