"""Integration tests for the PostgreSQL repositories.

These check value object handling and the constraints the domain relies on.
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from rolo.domain.model import Collaborator, Invite
from rolo.domain.repository import (
    CollaboratorRepository,
    CommunityRepository,
    InviteRepository,
    SubscriptionRepository,
    TransactionManager,
)
from rolo.domain.service import AccessControlService
from rolo.domain.value import (
    CollaboratorId,
    CollaboratorStatus,
    CommunityHandle,
    EmailAddress,
    InviteId,
    InviteStatus,
    InviteToken,
    Role,
    SeatClass,
)
from rolo.util.clock import utcnow
from tests.harness import create_env_fixture
from tests.helpers import create_community, new_user

pytestmark = pytest.mark.integration

integration_env = create_env_fixture(unmock={"persistence"})


def unique_handle() -> str:
    return f"it-{uuid4().hex[:12]}"


class TestCommunityRepositoryIntegration:
    @pytest.mark.asyncio
    async def test_find_by_handle_extracts_root_value(self, integration_env):
        # Arrange
        access_control = await integration_env.get(AccessControlService)
        community_repo = await integration_env.get(CommunityRepository)
        handle = unique_handle()
        community, _ = await create_community(access_control, handle=handle)

        # Act
        found = await community_repo.find_by_handle(CommunityHandle(handle.upper()))

        # Assert
        assert found is not None
        assert found.id == community.id
        assert found.handle == CommunityHandle(handle)


class TestCollaboratorRepositoryIntegration:
    @pytest.mark.asyncio
    async def test_duplicate_membership_raises_integrity_error(self, integration_env):
        # Arrange
        access_control = await integration_env.get(AccessControlService)
        collaborator_repo = await integration_env.get(CollaboratorRepository)
        transactions = await integration_env.get(TransactionManager)
        community, owner = await create_community(access_control, handle=unique_handle())
        duplicate = Collaborator(
            id=CollaboratorId(uuid4()),
            user_id=owner.user_id,
            community_id=community.id,
            role=Role.VIEWER,
            status=CollaboratorStatus.PENDING,
        )

        # Act / Assert: the savepoint keeps the request transaction usable
        with pytest.raises(IntegrityError):
            async with transactions.atomic():
                await collaborator_repo.save(duplicate)

    @pytest.mark.asyncio
    async def test_count_approved_by_role(self, integration_env):
        # Arrange
        access_control = await integration_env.get(AccessControlService)
        collaborator_repo = await integration_env.get(CollaboratorRepository)
        community, owner = await create_community(access_control, handle=unique_handle())
        await access_control.add_collaborator(
            owner.user_id, new_user(), community.id, Role.ADMIN
        )
        await access_control.add_collaborator(
            owner.user_id, new_user(), community.id, Role.VIEWER
        )
        await access_control.add_collaborator(
            owner.user_id,
            new_user(),
            community.id,
            Role.ADMIN,
            status=CollaboratorStatus.PENDING,
        )

        # Act
        team = await collaborator_repo.count_approved(
            community.id, Role.for_seat_class(SeatClass.TEAM)
        )

        # Assert
        assert team == 2

    @pytest.mark.asyncio
    async def test_save_if_status_skips_moved_row(self, integration_env):
        # Arrange - a pending request that gets rejected
        access_control = await integration_env.get(AccessControlService)
        collaborator_repo = await integration_env.get(CollaboratorRepository)
        handle = unique_handle()
        community, _ = await create_community(access_control, handle=handle)
        pending = await access_control.request_join(new_user(), CommunityHandle(handle))
        rejected = await collaborator_repo.save_if_status(
            pending.model_copy(update={"status": CollaboratorStatus.REJECTED}),
            CollaboratorStatus.PENDING,
        )

        # Act - an approval computed from the stale pending copy
        approved = await collaborator_repo.save_if_status(
            pending.model_copy(update={"status": CollaboratorStatus.APPROVED}),
            CollaboratorStatus.PENDING,
        )

        # Assert
        assert rejected is not None
        assert approved is None
        found = await collaborator_repo.find_by_user_and_community(
            pending.user_id, community.id
        )
        assert found.status == CollaboratorStatus.REJECTED


class TestInviteRepositoryIntegration:
    @pytest.mark.asyncio
    async def test_mark_accepted_only_once(self, integration_env):
        # Arrange
        access_control = await integration_env.get(AccessControlService)
        invite_repo = await integration_env.get(InviteRepository)
        community, owner = await create_community(access_control, handle=unique_handle())
        invite = await invite_repo.save(
            Invite(
                id=InviteId(uuid4()),
                community_id=community.id,
                email=EmailAddress("guest@example.com"),
                role=Role.VIEWER,
                token=InviteToken(uuid4().hex),
                invited_by=owner.user_id,
                expires_at=utcnow() + timedelta(days=7),
            )
        )

        # Act
        first = await invite_repo.mark_accepted(invite.id, new_user(), utcnow())
        second = await invite_repo.mark_accepted(invite.id, new_user(), utcnow())

        # Assert
        assert first is not None
        assert first.status == InviteStatus.ACCEPTED
        assert second is None
        found = await invite_repo.find_by_token(invite.token)
        assert found.accepted_by_user_id == first.accepted_by_user_id


class TestSubscriptionRepositoryIntegration:
    @pytest.mark.asyncio
    async def test_default_plans_seeded(self, integration_env):
        subscription_repo = await integration_env.get(SubscriptionRepository)

        free = await subscription_repo.find_plan_by_name("free")

        assert free is not None
        assert (free.max_team_members, free.max_viewers) == (5, 10)
