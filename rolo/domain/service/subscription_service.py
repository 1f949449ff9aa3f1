"""Subscription domain service.

Records plan and billing state transitions. Payments themselves happen at the
billing provider; this service only stores the outcome and derives the seat
limits in force.
"""

from datetime import timedelta
from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from rolo.config import SubscriptionSettings
from rolo.domain.error import ConflictError, InvalidTransitionError, NotFoundError
from rolo.domain.model import (
    CommunitySubscription,
    SeatLimits,
    SubscriptionPlan,
    SubscriptionUsage,
)
from rolo.domain.repository import SubscriptionRepository, TransactionManager
from rolo.domain.value import (
    BillingCycle,
    CommunityId,
    Role,
    SubscriptionId,
    SubscriptionStatus,
)
from rolo.util.clock import utcnow

from .base import Service

# Billing provider state machine
STATUS_TRANSITIONS: dict[SubscriptionStatus, frozenset[SubscriptionStatus]] = {
    SubscriptionStatus.FREE: frozenset(
        {SubscriptionStatus.TRIALING, SubscriptionStatus.ACTIVE}
    ),
    SubscriptionStatus.TRIALING: frozenset(
        {
            SubscriptionStatus.ACTIVE,
            SubscriptionStatus.PAST_DUE,
            SubscriptionStatus.UNPAID,
            SubscriptionStatus.CANCELED,
        }
    ),
    SubscriptionStatus.ACTIVE: frozenset(
        {
            SubscriptionStatus.PAST_DUE,
            SubscriptionStatus.UNPAID,
            SubscriptionStatus.CANCELED,
        }
    ),
    SubscriptionStatus.PAST_DUE: frozenset(
        {
            SubscriptionStatus.ACTIVE,
            SubscriptionStatus.UNPAID,
            SubscriptionStatus.CANCELED,
        }
    ),
    SubscriptionStatus.UNPAID: frozenset(
        {SubscriptionStatus.ACTIVE, SubscriptionStatus.CANCELED}
    ),
    SubscriptionStatus.CANCELED: frozenset(
        {
            SubscriptionStatus.FREE,
            SubscriptionStatus.TRIALING,
            SubscriptionStatus.ACTIVE,
        }
    ),
}


class SubscriptionService(Service):
    """Domain service for plans and community subscriptions."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        transactions: TransactionManager,
        settings: SubscriptionSettings,
    ) -> None:
        """Initialize subscription service.

        Args:
            subscription_repository: Subscription repository
            transactions: Transaction manager
            settings: Subscription settings (default plan, fallback limits)
        """
        self.subscription_repository = subscription_repository
        self.transactions = transactions
        self.settings = settings

    async def list_plans(self) -> list[SubscriptionPlan]:
        return await self.subscription_repository.list_plans(active_only=True)

    async def get_plan(self, name: str) -> SubscriptionPlan:
        """Get an active plan by name.

        Raises:
            NotFoundError: If no active plan has this name
        """
        plan = await self.subscription_repository.find_plan_by_name(name)
        if not plan or not plan.is_active:
            raise NotFoundError("Plan", name)
        return plan

    async def get_subscription(
        self, community_id: CommunityId
    ) -> CommunitySubscription | None:
        return await self.subscription_repository.find_by_community(community_id)

    async def require_subscription(
        self, community_id: CommunityId
    ) -> CommunitySubscription:
        subscription = await self.get_subscription(community_id)
        if not subscription:
            raise NotFoundError("Subscription", str(community_id))
        return subscription

    async def effective_limits(
        self, community_id: CommunityId
    ) -> tuple[SeatLimits, SubscriptionStatus]:
        """Resolve the seat limits in force for a community.

        The subscribed plan applies while its status grants plan limits, and a
        free status only ever gets a free plan's limits. Otherwise the default
        plan applies, and if no plan rows exist the configured fallback limits
        apply.

        Returns:
            Tuple of (limits, subscription status)
        """
        subscription = await self.subscription_repository.find_by_community(
            community_id
        )
        status = subscription.status if subscription else SubscriptionStatus.FREE

        if subscription and status.grants_plan_limits:
            plan = await self.subscription_repository.find_plan_by_id(
                subscription.plan_id
            )
            if plan and (plan.is_free or status != SubscriptionStatus.FREE):
                return plan.limits(), status

        default_plan = await self.subscription_repository.find_plan_by_name(
            self.settings.default_plan
        )
        if default_plan:
            return default_plan.limits(), status

        logfire.warn(
            "No subscription plans stored, using fallback limits",
            community_id=str(community_id),
        )
        return (
            SeatLimits(
                plan_name=self.settings.default_plan,
                max_team_members=self.settings.fallback_max_team_members,
                max_viewers=self.settings.fallback_max_viewers,
            ),
            status,
        )

    async def change_plan(
        self,
        community_id: CommunityId,
        plan_name: str,
        billing_cycle: BillingCycle = BillingCycle.MONTHLY,
    ) -> CommunitySubscription:
        """Record a plan change and start a new billing period.

        Downgrades are allowed: existing seats are kept but new grants are
        blocked while usage is above the new limits.

        Raises:
            NotFoundError: If the plan does not exist
        """
        with logfire.span(
            "subscription_service.change_plan",
            community_id=str(community_id),
            plan=plan_name,
            billing_cycle=billing_cycle.value,
        ):
            plan = await self.get_plan(plan_name)
            now = utcnow()
            status = SubscriptionStatus.FREE if plan.is_free else SubscriptionStatus.ACTIVE
            period_end = None if plan.is_free else now + timedelta(days=billing_cycle.period_days)

            existing = await self.subscription_repository.find_by_community(community_id)
            if existing:
                subscription = existing.model_copy(
                    update={
                        "plan_id": plan.id,
                        "status": status,
                        "billing_cycle": billing_cycle,
                        "current_period_start": now,
                        "current_period_end": period_end,
                        "cancel_at_period_end": False,
                        "canceled_at": None,
                        "updated_at": now,
                    }
                )
            else:
                subscription = CommunitySubscription(
                    id=SubscriptionId(uuid4()),
                    community_id=community_id,
                    plan_id=plan.id,
                    status=status,
                    billing_cycle=billing_cycle,
                    current_period_start=now,
                    current_period_end=period_end,
                    created_at=now,
                    updated_at=now,
                )

            try:
                async with self.transactions.atomic():
                    saved = await self.subscription_repository.save(subscription)
            except IntegrityError:
                raise ConflictError(
                    f"Subscription for community {community_id} changed concurrently"
                )

            logfire.info(
                "Subscription plan changed",
                community_id=str(community_id),
                plan=plan.name,
                status=status.value,
            )
            return saved

    async def cancel(self, community_id: CommunityId) -> CommunitySubscription:
        """Cancel at the end of the current period.

        Raises:
            NotFoundError: If the community has no subscription
            InvalidTransitionError: If it is on the free plan or already canceled
        """
        subscription = await self.require_subscription(community_id)
        if subscription.status in (SubscriptionStatus.FREE, SubscriptionStatus.CANCELED):
            raise InvalidTransitionError(
                "subscription", subscription.status.value, "canceled"
            )
        if subscription.cancel_at_period_end:
            return subscription

        now = utcnow()
        saved = await self.subscription_repository.save(
            subscription.model_copy(
                update={
                    "cancel_at_period_end": True,
                    "canceled_at": now,
                    "updated_at": now,
                }
            )
        )
        logfire.info("Subscription cancellation scheduled", community_id=str(community_id))
        return saved

    async def reactivate(self, community_id: CommunityId) -> CommunitySubscription:
        """Undo a scheduled cancellation.

        Raises:
            NotFoundError: If the community has no subscription
            InvalidTransitionError: If no cancellation is scheduled
        """
        subscription = await self.require_subscription(community_id)
        if not subscription.cancel_at_period_end:
            raise InvalidTransitionError(
                "subscription", subscription.status.value, "reactivated"
            )

        saved = await self.subscription_repository.save(
            subscription.model_copy(
                update={
                    "cancel_at_period_end": False,
                    "canceled_at": None,
                    "updated_at": utcnow(),
                }
            )
        )
        logfire.info("Subscription reactivated", community_id=str(community_id))
        return saved

    async def update_payment_method(
        self, community_id: CommunityId, payment_method_id: str
    ) -> CommunitySubscription:
        subscription = await self.require_subscription(community_id)
        saved = await self.subscription_repository.save(
            subscription.model_copy(
                update={
                    "payment_method_id": payment_method_id,
                    "has_payment_method": True,
                    "updated_at": utcnow(),
                }
            )
        )
        logfire.info("Payment method updated", community_id=str(community_id))
        return saved

    async def record_status(
        self, community_id: CommunityId, status: SubscriptionStatus
    ) -> CommunitySubscription:
        """Record a status reported by the billing provider.

        Raises:
            NotFoundError: If the community has no subscription
            InvalidTransitionError: If the transition is not allowed
        """
        subscription = await self.require_subscription(community_id)
        if subscription.status == status:
            return subscription
        if status not in STATUS_TRANSITIONS[subscription.status]:
            logfire.warn(
                "Rejected subscription status transition",
                community_id=str(community_id),
                current=subscription.status.value,
                target=status.value,
            )
            raise InvalidTransitionError(
                "subscription", subscription.status.value, status.value
            )

        now = utcnow()
        update: dict = {"status": status, "updated_at": now}
        if status == SubscriptionStatus.CANCELED:
            update["canceled_at"] = subscription.canceled_at or now
            update["cancel_at_period_end"] = False
        elif status == SubscriptionStatus.FREE:
            # Back on the default plan; the lapsed paid plan no longer applies
            default_plan = await self.subscription_repository.find_plan_by_name(
                self.settings.default_plan
            )
            if default_plan:
                update["plan_id"] = default_plan.id
            update["current_period_start"] = now
            update["current_period_end"] = None
            update["cancel_at_period_end"] = False

        saved = await self.subscription_repository.save(
            subscription.model_copy(update=update)
        )
        logfire.info(
            "Subscription status recorded",
            community_id=str(community_id),
            old_status=subscription.status.value,
            new_status=status.value,
        )
        return saved

    @staticmethod
    def available_roles(usage: SubscriptionUsage) -> list[Role]:
        """Roles that can still be granted under the current usage."""
        roles = []
        if not usage.is_team_limit_reached:
            roles.extend([Role.ADMIN, Role.LIMITED_ADMIN])
        if not usage.is_viewer_limit_reached:
            roles.append(Role.VIEWER)
        return roles

    def recommendations(
        self,
        usage: SubscriptionUsage,
        subscription: CommunitySubscription | None,
    ) -> list[str]:
        """Upgrade and billing hints for the subscription screen."""
        threshold = self.settings.recommendation_threshold_percent
        hints = []

        if usage.is_team_limit_reached:
            hints.append("Team member limit reached. Upgrade to add more team members.")
        elif (usage.team_usage_percent or 0) >= threshold:
            hints.append(
                f"Team member usage is at {usage.team_usage_percent:.0f}%. "
                "Consider upgrading soon."
            )

        if usage.is_viewer_limit_reached:
            hints.append("Viewer limit reached. Upgrade to add more viewers.")
        elif (usage.viewer_usage_percent or 0) >= threshold:
            hints.append(
                f"Viewer usage is at {usage.viewer_usage_percent:.0f}%. "
                "Consider upgrading soon."
            )

        if (
            subscription
            and subscription.status != SubscriptionStatus.FREE
            and not subscription.has_payment_method
        ):
            hints.append("Add a payment method to avoid service interruption.")

        return hints
