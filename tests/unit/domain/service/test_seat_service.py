"""Unit tests for SeatLimitService."""

import pytest

from rolo.domain.error import SeatLimitExceededError
from rolo.domain.service import (
    AccessControlService,
    SeatLimitService,
    SubscriptionService,
)
from rolo.domain.value import CommunityHandle, Role, SeatClass
from tests.harness import create_env_fixture
from tests.helpers import create_community, new_user, use_plan

unit_env = create_env_fixture()


class TestCanAdd:
    """Tests for can_add and ensure_can_add."""

    @pytest.mark.asyncio
    async def test_false_at_limit(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        seat_service = await unit_env.get(SeatLimitService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)
        await use_plan(unit_env, community.id, max_team_members=2, max_viewers=1)
        await access_control.add_collaborator(owner_id, new_user(), community.id, Role.ADMIN)

        # Act & Assert
        assert await seat_service.can_add(community.id, SeatClass.TEAM) is False
        assert await seat_service.can_add(community.id, SeatClass.VIEWER) is True

    @pytest.mark.asyncio
    async def test_true_when_unlimited(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        seat_service = await unit_env.get(SeatLimitService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)
        await subscription_service.change_plan(community.id, "enterprise")
        for _ in range(7):
            await access_control.add_collaborator(
                owner_id, new_user(), community.id, Role.ADMIN
            )

        # Act & Assert
        assert await seat_service.can_add(community.id, SeatClass.TEAM) is True

    @pytest.mark.asyncio
    async def test_ensure_can_add_reports_counts(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        seat_service = await unit_env.get(SeatLimitService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)
        await use_plan(unit_env, community.id, max_team_members=5, max_viewers=0)

        with pytest.raises(SeatLimitExceededError) as exc_info:
            await seat_service.ensure_can_add(community.id, SeatClass.VIEWER)

        assert exc_info.value.seat_class == "viewer"
        assert exc_info.value.limit == 0
        assert exc_info.value.current == 0


class TestUsage:
    """Tests for usage method."""

    @pytest.mark.asyncio
    async def test_counts_only_approved(self, unit_env):
        """Pending requests do not consume seats; the owner takes a team seat."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        seat_service = await unit_env.get(SeatLimitService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.add_collaborator(
            owner_id, new_user(), community.id, Role.LIMITED_ADMIN
        )
        await access_control.add_collaborator(
            owner_id, new_user(), community.id, Role.VIEWER
        )
        await access_control.request_join(new_user(), CommunityHandle("testcorp"))

        # Act
        usage = await seat_service.usage(community.id)

        # Assert
        assert usage.plan_name == "free"
        assert usage.team_members == 2
        assert usage.viewers == 1
        assert usage.team_usage_percent == 40.0
        assert usage.viewer_usage_percent == 10.0
        assert usage.is_team_limit_reached is False

    @pytest.mark.asyncio
    async def test_unlimited_usage_has_no_percentage(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        subscription_service = await unit_env.get(SubscriptionService)
        seat_service = await unit_env.get(SeatLimitService)
        community, _ = await create_community(access_control)
        await subscription_service.change_plan(community.id, "enterprise")

        usage = await seat_service.usage(community.id)

        assert usage.team_usage_percent is None
        assert usage.is_team_limit_reached is False
        assert usage.is_viewer_limit_reached is False
