"""Unit tests for SubscriptionService."""

import pytest

from rolo.domain.error import InvalidTransitionError, NotFoundError
from rolo.domain.model import SeatLimits
from rolo.domain.repository import SubscriptionRepository
from rolo.domain.service import (
    STATUS_TRANSITIONS,
    AccessControlService,
    SubscriptionService,
)
from rolo.domain.value import BillingCycle, SubscriptionStatus
from tests.harness import create_env_fixture
from tests.helpers import create_community, new_user

unit_env = create_env_fixture()


class TestPlans:
    """Tests for plan lookups and effective limits."""

    @pytest.mark.asyncio
    async def test_default_plans_seeded(self, unit_env):
        subscription_service = await unit_env.get(SubscriptionService)

        plans = await subscription_service.list_plans()

        assert [p.name for p in plans] == ["free", "starter", "professional", "enterprise"]
        free = plans[0]
        assert (free.max_team_members, free.max_viewers) == (5, 10)
        assert plans[-1].max_team_members == -1

    @pytest.mark.asyncio
    async def test_unknown_plan_not_found(self, unit_env):
        subscription_service = await unit_env.get(SubscriptionService)

        with pytest.raises(NotFoundError):
            await subscription_service.get_plan("platinum")

    @pytest.mark.asyncio
    async def test_community_without_subscription_gets_free_limits(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control)

        # Act
        limits, status = await subscription_service.effective_limits(community.id)

        # Assert
        assert limits == SeatLimits(plan_name="free", max_team_members=5, max_viewers=10)
        assert status == SubscriptionStatus.FREE
        assert await subscription_service.get_subscription(community.id) is None


class TestChangePlan:
    """Tests for change_plan and the billing state machine."""

    @pytest.mark.asyncio
    async def test_upgrade_creates_active_subscription(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control)

        # Act
        subscription = await subscription_service.change_plan(
            community.id, "starter", BillingCycle.YEARLY
        )

        # Assert
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.billing_cycle == BillingCycle.YEARLY
        assert subscription.current_period_end is not None
        limits, _ = await subscription_service.effective_limits(community.id)
        assert (limits.max_team_members, limits.max_viewers) == (25, 100)

    @pytest.mark.asyncio
    async def test_change_back_to_free_keeps_one_row(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control)

        first = await subscription_service.change_plan(community.id, "professional")
        second = await subscription_service.change_plan(community.id, "free")

        assert second.id == first.id
        assert second.status == SubscriptionStatus.FREE
        assert second.current_period_end is None

    @pytest.mark.asyncio
    async def test_unpaid_falls_back_to_default_plan(self, unit_env):
        """Unpaid subscriptions lose their plan limits."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control)
        await subscription_service.change_plan(community.id, "professional")

        # Act
        await subscription_service.record_status(community.id, SubscriptionStatus.UNPAID)
        limits, status = await subscription_service.effective_limits(community.id)

        # Assert
        assert status == SubscriptionStatus.UNPAID
        assert limits.plan_name == "free"

    @pytest.mark.asyncio
    async def test_past_due_keeps_plan_limits(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control)
        await subscription_service.change_plan(community.id, "starter")

        await subscription_service.record_status(community.id, SubscriptionStatus.PAST_DUE)
        limits, _ = await subscription_service.effective_limits(community.id)

        assert limits.plan_name == "starter"

    @pytest.mark.asyncio
    async def test_canceled_then_free_returns_to_free_limits(self, unit_env):
        """A lapsed paid plan does not come back when the provider reports free."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control)
        await subscription_service.change_plan(community.id, "professional")
        await subscription_service.record_status(community.id, SubscriptionStatus.CANCELED)

        # Act
        subscription = await subscription_service.record_status(
            community.id, SubscriptionStatus.FREE
        )
        limits, status = await subscription_service.effective_limits(community.id)

        # Assert
        free = await subscription_service.get_plan("free")
        assert subscription.plan_id == free.id
        assert subscription.current_period_end is None
        assert status == SubscriptionStatus.FREE
        assert limits.plan_name == "free"
        assert (limits.max_team_members, limits.max_viewers) == (5, 10)

    @pytest.mark.asyncio
    async def test_free_status_ignores_paid_plan_row(self, unit_env):
        """A free status never unlocks the limits of a paid plan it still references."""
        # Arrange - a row left pointing at a paid plan
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        repository = await unit_env.get(SubscriptionRepository)
        community, _ = await create_community(access_control)
        paid = await subscription_service.change_plan(community.id, "enterprise")
        await repository.save(paid.model_copy(update={"status": SubscriptionStatus.FREE}))

        # Act
        limits, _ = await subscription_service.effective_limits(community.id)

        # Assert
        assert limits.plan_name == "free"
        assert (limits.max_team_members, limits.max_viewers) == (5, 10)

    @pytest.mark.asyncio
    async def test_illegal_status_transition(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control)
        await subscription_service.change_plan(community.id, "free")

        with pytest.raises(InvalidTransitionError):
            await subscription_service.record_status(
                community.id, SubscriptionStatus.PAST_DUE
            )

    @pytest.mark.asyncio
    async def test_record_status_without_subscription(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control)

        with pytest.raises(NotFoundError):
            await subscription_service.record_status(
                community.id, SubscriptionStatus.ACTIVE
            )

    def test_every_status_has_transitions(self):
        assert set(STATUS_TRANSITIONS) == set(SubscriptionStatus)
        for status, targets in STATUS_TRANSITIONS.items():
            assert status not in targets


class TestCancellation:
    """Tests for cancel, reactivate and payment method."""

    @pytest.mark.asyncio
    async def test_cancel_then_reactivate(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control, new_user())
        await subscription_service.change_plan(community.id, "starter")

        # Act
        canceled = await subscription_service.cancel(community.id)
        reactivated = await subscription_service.reactivate(community.id)

        # Assert
        assert canceled.cancel_at_period_end is True
        assert canceled.canceled_at is not None
        assert canceled.status == SubscriptionStatus.ACTIVE
        assert reactivated.cancel_at_period_end is False
        assert reactivated.canceled_at is None

    @pytest.mark.asyncio
    async def test_free_plan_cannot_be_canceled(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control)
        await subscription_service.change_plan(community.id, "free")

        with pytest.raises(InvalidTransitionError):
            await subscription_service.cancel(community.id)

    @pytest.mark.asyncio
    async def test_reactivate_without_cancellation(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control)
        await subscription_service.change_plan(community.id, "starter")

        with pytest.raises(InvalidTransitionError):
            await subscription_service.reactivate(community.id)

    @pytest.mark.asyncio
    async def test_update_payment_method(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        community, _ = await create_community(access_control)
        await subscription_service.change_plan(community.id, "starter")

        updated = await subscription_service.update_payment_method(
            community.id, "pm_card_visa"
        )

        assert updated.payment_method_id == "pm_card_visa"
        assert updated.has_payment_method is True
