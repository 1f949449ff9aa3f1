"""In-memory subscription repository for testing."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from rolo.domain.model import CommunitySubscription, SubscriptionPlan
from rolo.domain.repository import SubscriptionRepository
from rolo.domain.value import CommunityId, PlanId

from .database import InMemoryDatabase


class InMemorySubscriptionRepository(SubscriptionRepository):
    """In-memory implementation of SubscriptionRepository for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.db = database

    async def list_plans(self, active_only: bool = True) -> list[SubscriptionPlan]:
        plans = [p for p in self.db.plans.values() if p.is_active or not active_only]
        return sorted(plans, key=lambda p: p.price_monthly)

    async def find_plan_by_id(self, plan_id: PlanId) -> Optional[SubscriptionPlan]:
        return self.db.plans.get(plan_id)

    async def find_plan_by_name(self, name: str) -> Optional[SubscriptionPlan]:
        for plan in self.db.plans.values():
            if plan.name == name:
                return plan
        return None

    async def save_plan(self, plan: SubscriptionPlan) -> SubscriptionPlan:
        existing = await self.find_plan_by_name(plan.name)
        if existing and existing.id != plan.id:
            raise IntegrityError("Duplicate plan name", None, Exception())

        self.db.put(self.db.plans, plan.id, plan)
        return plan

    async def find_by_community(
        self, community_id: CommunityId
    ) -> Optional[CommunitySubscription]:
        for subscription in self.db.subscriptions.values():
            if subscription.community_id == community_id:
                return subscription
        return None

    async def save(self, subscription: CommunitySubscription) -> CommunitySubscription:
        """Save a subscription (create or update).

        Raises:
            IntegrityError: If another subscription exists for the community
        """
        existing = await self.find_by_community(subscription.community_id)
        if existing and existing.id != subscription.id:
            raise IntegrityError("Duplicate community subscription", None, Exception())

        self.db.put(self.db.subscriptions, subscription.id, subscription)
        return subscription
