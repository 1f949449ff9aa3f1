"""Subscription plans, community subscriptions and derived seat usage."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, computed_field

from rolo.domain.model.common import DomainModel
from rolo.domain.value import (
    BillingCycle,
    CommunityId,
    PlanId,
    SeatClass,
    SubscriptionId,
    SubscriptionStatus,
)
from rolo.util.clock import utcnow

UNLIMITED = -1


class SeatLimits(DomainModel):
    """Seat caps in force for a community; -1 means unlimited."""

    plan_name: str
    max_team_members: int
    max_viewers: int

    def limit_for(self, seat_class: SeatClass) -> int:
        if seat_class is SeatClass.TEAM:
            return self.max_team_members
        return self.max_viewers

    def has_room(self, seat_class: SeatClass, current: int) -> bool:
        limit = self.limit_for(seat_class)
        return limit == UNLIMITED or current < limit


class SubscriptionPlan(DomainModel):
    """A purchasable plan with seat limits and feature flags."""

    id: PlanId
    name: str
    display_name: str
    description: Optional[str] = None
    price_monthly: Decimal = Decimal("0")
    price_yearly: Decimal = Decimal("0")
    max_team_members: int
    max_viewers: int
    features: dict[str, bool] = Field(default_factory=dict)
    is_active: bool = True

    @property
    def is_free(self) -> bool:
        return self.price_monthly == 0 and self.price_yearly == 0

    def limits(self) -> SeatLimits:
        return SeatLimits(
            plan_name=self.name,
            max_team_members=self.max_team_members,
            max_viewers=self.max_viewers,
        )

    def price_for(self, cycle: BillingCycle) -> Decimal:
        return self.price_yearly if cycle is BillingCycle.YEARLY else self.price_monthly


class CommunitySubscription(DomainModel):
    """Recorded subscription state of a community.

    Payment is handled by the billing provider; only the resulting state
    transitions are stored here.
    """

    id: SubscriptionId
    community_id: CommunityId
    plan_id: PlanId
    status: SubscriptionStatus = SubscriptionStatus.FREE
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    current_period_start: datetime = Field(default_factory=utcnow)
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False
    canceled_at: Optional[datetime] = None
    stripe_subscription_id: Optional[str] = None
    stripe_customer_id: Optional[str] = None
    payment_method_id: Optional[str] = None
    has_payment_method: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


def _percent(count: int, limit: int) -> Optional[float]:
    if limit == UNLIMITED:
        return None
    if limit == 0:
        return 100.0
    return round(count * 100.0 / limit, 1)


class SubscriptionUsage(DomainModel):
    """Seat usage derived from approved collaborators. Never stored."""

    community_id: CommunityId
    plan_name: str
    status: SubscriptionStatus
    team_members: int
    viewers: int
    max_team_members: int
    max_viewers: int

    @computed_field
    @property
    def team_usage_percent(self) -> Optional[float]:
        return _percent(self.team_members, self.max_team_members)

    @computed_field
    @property
    def viewer_usage_percent(self) -> Optional[float]:
        return _percent(self.viewers, self.max_viewers)

    @computed_field
    @property
    def is_team_limit_reached(self) -> bool:
        return (
            self.max_team_members != UNLIMITED
            and self.team_members >= self.max_team_members
        )

    @computed_field
    @property
    def is_viewer_limit_reached(self) -> bool:
        return self.max_viewers != UNLIMITED and self.viewers >= self.max_viewers
