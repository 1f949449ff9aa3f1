"""Get subscription usage use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from rolo.application.usecase.base import BaseUseCase
from rolo.application.usecase.subscription.common import SubscriptionItem
from rolo.domain.service import (
    MANAGER_ROLES,
    AccessControlService,
    SeatLimitService,
    SubscriptionService,
)
from rolo.domain.value import CommunityId, Role, SubscriptionStatus, UserId


class GetUsageRequest(BaseModel):
    user_id: str  # User ID from auth
    community_id: str


class GetUsageResponse(BaseModel):
    """Seat usage against the limits in force, with upgrade hints."""

    community_id: str
    plan_name: str
    status: SubscriptionStatus
    team_members: int
    viewers: int
    max_team_members: int  # -1 = unlimited
    max_viewers: int  # -1 = unlimited
    team_usage_percent: float | None  # None when unlimited
    viewer_usage_percent: float | None
    is_team_limit_reached: bool
    is_viewer_limit_reached: bool
    available_roles: list[Role]
    recommendations: list[str]
    subscription: SubscriptionItem | None = None


class GetUsageUseCase(BaseUseCase):
    """Use case for the subscription screen of a community (owner or admin)."""

    def __init__(
        self,
        access_control: AccessControlService,
        seat_limit_service: SeatLimitService,
        subscription_service: SubscriptionService,
    ) -> None:
        """Initialize use case.

        Args:
            access_control: Access control domain service
            seat_limit_service: Seat limit enforcer
            subscription_service: Subscription domain service
        """
        self.access_control = access_control
        self.seat_limit_service = seat_limit_service
        self.subscription_service = subscription_service

    async def execute(self, request: GetUsageRequest) -> GetUsageResponse:
        user_id = UserId(UUID(request.user_id))
        community_id = CommunityId(UUID(request.community_id))

        with logfire.span("get_usage", community_id=str(community_id)):
            await self.access_control.authorize(user_id, community_id, MANAGER_ROLES)

            usage = await self.seat_limit_service.usage(community_id)
            subscription = await self.subscription_service.get_subscription(
                community_id
            )
            return GetUsageResponse(
                community_id=str(community_id),
                plan_name=usage.plan_name,
                status=usage.status,
                team_members=usage.team_members,
                viewers=usage.viewers,
                max_team_members=usage.max_team_members,
                max_viewers=usage.max_viewers,
                team_usage_percent=usage.team_usage_percent,
                viewer_usage_percent=usage.viewer_usage_percent,
                is_team_limit_reached=usage.is_team_limit_reached,
                is_viewer_limit_reached=usage.is_viewer_limit_reached,
                available_roles=self.subscription_service.available_roles(usage),
                recommendations=self.subscription_service.recommendations(
                    usage, subscription
                ),
                subscription=(
                    SubscriptionItem.from_subscription(subscription)
                    if subscription
                    else None
                ),
            )
