"""Subscription plan and community subscription repository interface."""

from abc import ABC, abstractmethod

from rolo.domain.model.subscription import CommunitySubscription, SubscriptionPlan
from rolo.domain.value import CommunityId, PlanId


class SubscriptionRepository(ABC):
    """Repository for SubscriptionPlan and CommunitySubscription."""

    @abstractmethod
    async def list_plans(self, active_only: bool = True) -> list[SubscriptionPlan]:
        """List plans ordered by monthly price."""
        pass

    @abstractmethod
    async def find_plan_by_id(self, plan_id: PlanId) -> SubscriptionPlan | None:
        pass

    @abstractmethod
    async def find_plan_by_name(self, name: str) -> SubscriptionPlan | None:
        pass

    @abstractmethod
    async def save_plan(self, plan: SubscriptionPlan) -> SubscriptionPlan:
        """Save a plan (create or update).

        Raises:
            IntegrityError: If another plan already uses the name
        """
        pass

    @abstractmethod
    async def find_by_community(
        self, community_id: CommunityId
    ) -> CommunitySubscription | None:
        """Find the subscription of a community, if any."""
        pass

    @abstractmethod
    async def save(self, subscription: CommunitySubscription) -> CommunitySubscription:
        """Save a community subscription (create or update).

        Raises:
            IntegrityError: If the community already has another subscription
        """
        pass
