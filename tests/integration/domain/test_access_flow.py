"""Integration tests for access control over PostgreSQL."""

from uuid import uuid4

import pytest

from rolo.domain.error import ConflictError, SeatLimitExceededError
from rolo.domain.service import AccessControlService, SeatLimitService
from rolo.domain.value import CollaboratorStatus, CommunityHandle, Role
from tests.harness import create_env_fixture
from tests.helpers import create_community, new_user, use_plan

pytestmark = pytest.mark.integration

integration_env = create_env_fixture(unmock={"persistence"})


def unique_handle() -> str:
    return f"it-{uuid4().hex[:12]}"


class TestAccessFlowIntegration:
    @pytest.mark.asyncio
    async def test_join_and_approve(self, integration_env):
        # Arrange
        access_control = await integration_env.get(AccessControlService)
        handle = unique_handle()
        community, owner = await create_community(access_control, handle=handle)
        joiner = new_user()

        # Act
        pending = await access_control.request_join(joiner, CommunityHandle(handle))
        approved = await access_control.review_collaborator(
            owner.user_id, community.id, joiner, approve=True
        )

        # Assert
        assert pending.status == CollaboratorStatus.PENDING
        assert approved.status == CollaboratorStatus.APPROVED
        assert await access_control.check_access(joiner) is True

    @pytest.mark.asyncio
    async def test_failed_grant_leaves_no_row(self, integration_env):
        # Arrange
        access_control = await integration_env.get(AccessControlService)
        seat_limit_service = await integration_env.get(SeatLimitService)
        community, owner = await create_community(access_control, handle=unique_handle())
        await use_plan(integration_env, community.id, max_team_members=1, max_viewers=1)

        # Act
        with pytest.raises(SeatLimitExceededError):
            await access_control.add_collaborator(
                owner.user_id, new_user(), community.id, Role.ADMIN
            )

        # Assert
        usage = await seat_limit_service.usage(community.id)
        assert usage.team_members == 1

    @pytest.mark.asyncio
    async def test_second_join_conflicts(self, integration_env):
        access_control = await integration_env.get(AccessControlService)
        handle = unique_handle()
        await create_community(access_control, handle=handle)
        joiner = new_user()
        await access_control.request_join(joiner, CommunityHandle(handle))

        with pytest.raises(ConflictError):
            await access_control.request_join(joiner, CommunityHandle(handle))
