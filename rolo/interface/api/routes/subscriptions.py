"""Subscription routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header
from pydantic import BaseModel, Field

from rolo.application.usecase.subscription import (
    CancelSubscriptionUseCase,
    ChangePlanRequest,
    ChangePlanUseCase,
    GetUsageRequest,
    GetUsageResponse,
    GetUsageUseCase,
    ListPlansResponse,
    ListPlansUseCase,
    ReactivateSubscriptionUseCase,
    SubscriptionActionRequest,
    SubscriptionItem,
    UpdatePaymentMethodRequest,
    UpdatePaymentMethodUseCase,
)
from rolo.domain.service import IdentityService
from rolo.domain.value import BillingCycle
from rolo.interface.api.auth import authenticate

router = APIRouter(tags=["subscriptions"], route_class=DishkaRoute)


class ChangePlanAPIRequest(BaseModel):
    plan_name: str
    billing_cycle: BillingCycle = BillingCycle.MONTHLY


class PaymentMethodAPIRequest(BaseModel):
    payment_method_id: str = Field(min_length=1, max_length=255)


@router.get("/subscriptions/plans", response_model=ListPlansResponse)
async def list_plans(
    list_plans_use_case: FromDishka[ListPlansUseCase],
) -> ListPlansResponse:
    """List the active plans, cheapest first."""
    return await list_plans_use_case.execute()


@router.get(
    "/communities/{community_id}/subscription/usage", response_model=GetUsageResponse
)
async def get_usage(
    community_id: UUID,
    get_usage_use_case: FromDishka[GetUsageUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> GetUsageResponse:
    """Seat usage, available roles and upgrade hints (owner or admin)."""
    user_id = await authenticate(identity_service, authorization)
    return await get_usage_use_case.execute(
        GetUsageRequest(user_id=user_id, community_id=str(community_id))
    )


@router.put("/communities/{community_id}/subscription", response_model=SubscriptionItem)
async def change_plan(
    community_id: UUID,
    request: ChangePlanAPIRequest,
    change_plan_use_case: FromDishka[ChangePlanUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> SubscriptionItem:
    """Switch the community to another plan (owner only)."""
    user_id = await authenticate(identity_service, authorization)
    return await change_plan_use_case.execute(
        ChangePlanRequest(
            user_id=user_id,
            community_id=str(community_id),
            plan_name=request.plan_name,
            billing_cycle=request.billing_cycle,
        )
    )


@router.post(
    "/communities/{community_id}/subscription/cancel", response_model=SubscriptionItem
)
async def cancel_subscription(
    community_id: UUID,
    cancel_subscription_use_case: FromDishka[CancelSubscriptionUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> SubscriptionItem:
    """Cancel at the end of the current period (owner only)."""
    user_id = await authenticate(identity_service, authorization)
    return await cancel_subscription_use_case.execute(
        SubscriptionActionRequest(user_id=user_id, community_id=str(community_id))
    )


@router.post(
    "/communities/{community_id}/subscription/reactivate",
    response_model=SubscriptionItem,
)
async def reactivate_subscription(
    community_id: UUID,
    reactivate_subscription_use_case: FromDishka[ReactivateSubscriptionUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> SubscriptionItem:
    """Undo a scheduled cancellation (owner only)."""
    user_id = await authenticate(identity_service, authorization)
    return await reactivate_subscription_use_case.execute(
        SubscriptionActionRequest(user_id=user_id, community_id=str(community_id))
    )


@router.put(
    "/communities/{community_id}/subscription/payment-method",
    response_model=SubscriptionItem,
)
async def update_payment_method(
    community_id: UUID,
    request: PaymentMethodAPIRequest,
    update_payment_method_use_case: FromDishka[UpdatePaymentMethodUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> SubscriptionItem:
    """Store the payment method id issued by the billing provider (owner only)."""
    user_id = await authenticate(identity_service, authorization)
    return await update_payment_method_use_case.execute(
        UpdatePaymentMethodRequest(
            user_id=user_id,
            community_id=str(community_id),
            payment_method_id=request.payment_method_id,
        )
    )
