"""Current user routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header

from rolo.application.usecase.community import (
    GetAccessStateRequest,
    GetAccessStateResponse,
    GetAccessStateUseCase,
)
from rolo.domain.service import IdentityService
from rolo.interface.api.auth import authenticate

router = APIRouter(prefix="/me", tags=["me"], route_class=DishkaRoute)


@router.get("/access", response_model=GetAccessStateResponse)
async def get_access_state(
    get_access_state_use_case: FromDishka[GetAccessStateUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> GetAccessStateResponse:
    """Get the caller's memberships and whether they can enter the app.

    A user without any approved membership should be sent to create or join
    a community.
    """
    user_id = await authenticate(identity_service, authorization)
    return await get_access_state_use_case.execute(
        GetAccessStateRequest(user_id=user_id)
    )
