"""PostgreSQL implementation of Subscription repository."""

from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rolo.domain.model import CommunitySubscription, SubscriptionPlan
from rolo.domain.repository import SubscriptionRepository
from rolo.domain.value import CommunityId, PlanId
from rolo.persistence.mappers import (
    plan_to_dict,
    row_to_plan,
    row_to_subscription,
    subscription_to_dict,
)
from rolo.persistence.tables import (
    community_subscriptions_table,
    subscription_plans_table,
)
from rolo.util.resilience import store_read, store_write


class PostgresSubscriptionRepository(SubscriptionRepository):
    """PostgreSQL implementation of SubscriptionRepository."""

    def __init__(self, session: AsyncSession, read_retries: int = 1) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            read_retries: Retries for idempotent reads
        """
        self.session = session
        self.read_retries = read_retries

    @store_read
    async def list_plans(self, active_only: bool = True) -> list[SubscriptionPlan]:
        """List plans ordered by monthly price."""
        stmt = select(subscription_plans_table).order_by(
            subscription_plans_table.c.price_monthly
        )
        if active_only:
            stmt = stmt.where(subscription_plans_table.c.is_active.is_(True))

        result = await self.session.execute(stmt)
        return [row_to_plan(dict(row)) for row in result.mappings().all()]

    @store_read
    async def find_plan_by_id(self, plan_id: PlanId) -> Optional[SubscriptionPlan]:
        stmt = select(subscription_plans_table).where(
            subscription_plans_table.c.id == plan_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_plan(dict(row)) if row else None

    @store_read
    async def find_plan_by_name(self, name: str) -> Optional[SubscriptionPlan]:
        stmt = select(subscription_plans_table).where(
            subscription_plans_table.c.name == name
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_plan(dict(row)) if row else None

    @store_write
    async def save_plan(self, plan: SubscriptionPlan) -> SubscriptionPlan:
        plan_dict = plan_to_dict(plan)

        existing = await self.session.execute(
            select(subscription_plans_table.c.id).where(
                subscription_plans_table.c.id == plan.id
            )
        )
        if existing.first():
            stmt = (
                update(subscription_plans_table)
                .where(subscription_plans_table.c.id == plan.id)
                .values(**plan_dict)
            )
        else:
            stmt = insert(subscription_plans_table).values(**plan_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return plan

    @store_read
    async def find_by_community(
        self, community_id: CommunityId
    ) -> Optional[CommunitySubscription]:
        stmt = select(community_subscriptions_table).where(
            community_subscriptions_table.c.community_id == community_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_subscription(dict(row)) if row else None

    @store_write
    async def save(self, subscription: CommunitySubscription) -> CommunitySubscription:
        """Save a subscription (create or update).

        Raises:
            IntegrityError: If another subscription exists for the community
        """
        subscription_dict = subscription_to_dict(subscription)

        existing = await self.session.execute(
            select(community_subscriptions_table.c.id).where(
                community_subscriptions_table.c.id == subscription.id
            )
        )
        if existing.first():
            stmt = (
                update(community_subscriptions_table)
                .where(community_subscriptions_table.c.id == subscription.id)
                .values(**subscription_dict)
            )
        else:
            stmt = insert(community_subscriptions_table).values(**subscription_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return subscription
