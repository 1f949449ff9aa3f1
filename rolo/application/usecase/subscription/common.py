"""Subscription response items."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from rolo.domain.model import CommunitySubscription, SubscriptionPlan
from rolo.domain.value import BillingCycle, SubscriptionStatus


class PlanItem(BaseModel):
    """Subscription plan in responses."""

    plan_id: str
    name: str
    display_name: str
    description: str | None = None
    price_monthly: Decimal
    price_yearly: Decimal
    max_team_members: int  # -1 = unlimited
    max_viewers: int  # -1 = unlimited
    features: dict[str, bool]

    @classmethod
    def from_plan(cls, plan: SubscriptionPlan) -> "PlanItem":
        return cls(
            plan_id=str(plan.id),
            name=plan.name,
            display_name=plan.display_name,
            description=plan.description,
            price_monthly=plan.price_monthly,
            price_yearly=plan.price_yearly,
            max_team_members=plan.max_team_members,
            max_viewers=plan.max_viewers,
            features=plan.features,
        )


class SubscriptionItem(BaseModel):
    """Community subscription in responses."""

    subscription_id: str
    community_id: str
    plan_id: str
    status: SubscriptionStatus
    billing_cycle: BillingCycle
    current_period_start: datetime
    current_period_end: datetime | None = None
    cancel_at_period_end: bool
    canceled_at: datetime | None = None
    has_payment_method: bool

    @classmethod
    def from_subscription(
        cls, subscription: CommunitySubscription
    ) -> "SubscriptionItem":
        return cls(
            subscription_id=str(subscription.id),
            community_id=str(subscription.community_id),
            plan_id=str(subscription.plan_id),
            status=subscription.status,
            billing_cycle=subscription.billing_cycle,
            current_period_start=subscription.current_period_start,
            current_period_end=subscription.current_period_end,
            cancel_at_period_end=subscription.cancel_at_period_end,
            canceled_at=subscription.canceled_at,
            has_payment_method=subscription.has_payment_method,
        )
