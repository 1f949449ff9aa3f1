"""Unit tests for AccessControlService."""

import asyncio
from contextlib import asynccontextmanager
from uuid import uuid4

import pytest

from rolo.domain.error import (
    ConflictError,
    DependencyFailureError,
    ForbiddenError,
    InconsistencyError,
    InvalidTransitionError,
    NotFoundError,
    SeatLimitExceededError,
    ValidationError,
)
from rolo.domain.model import (
    AccessEventKind,
    CollaboratorUpdate,
    CommunityUpdate,
)
from rolo.domain.repository import CollaboratorRepository, TransactionManager
from rolo.domain.service import (
    ANY_ROLE,
    MANAGER_ROLES,
    OWNER_ONLY,
    AccessControlService,
    AccessEventBus,
    CommunityService,
)
from rolo.domain.value import CollaboratorStatus, CommunityHandle, Role
from tests.harness import create_env_fixture
from tests.helpers import create_community, make_details, new_user, use_plan

unit_env = create_env_fixture()


class _AutocommitTransactions:
    """Transaction manager whose blocks never roll back."""

    @asynccontextmanager
    async def atomic(self):
        yield

    async def lock_community(self, community_id):
        return None


class TestCreateCommunity:
    """Tests for create_community method."""

    @pytest.mark.asyncio
    async def test_creator_becomes_approved_owner(self, unit_env):
        """Creating a community should grant the creator an approved owner row."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        creator = new_user()

        # Act
        community, owner = await access_control.create_community(
            creator, make_details("testcorp")
        )

        # Assert
        assert community.handle.root == "testcorp"
        assert community.owner_id == creator
        assert owner.user_id == creator
        assert owner.role == Role.OWNER
        assert owner.status == CollaboratorStatus.APPROVED
        assert owner.joined_at is not None
        assert await access_control.check_access(creator) is True

    @pytest.mark.asyncio
    async def test_exactly_one_owner_after_creation(self, unit_env):
        """A new community has exactly one approved owner."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)

        # Act
        community, _ = await create_community(access_control)
        collaborators = await access_control.collaborator_service.list_for_community(
            community.id
        )

        # Assert
        owners = [c for c in collaborators if c.role == Role.OWNER and c.is_approved]
        assert len(owners) == 1

    @pytest.mark.asyncio
    async def test_handle_taken_case_insensitive(self, unit_env):
        """A handle differing only by case should be a conflict."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        await create_community(access_control, handle="testcorp")

        # Act & Assert
        with pytest.raises(ConflictError, match="already taken"):
            await access_control.create_community(new_user(), make_details("TestCorp"))

    @pytest.mark.asyncio
    async def test_concurrent_creation_with_same_handle(self, unit_env):
        """Of two concurrent creations with one handle, exactly one wins."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)

        # Act
        results = await asyncio.gather(
            access_control.create_community(new_user(), make_details("race")),
            access_control.create_community(new_user(), make_details("race")),
            return_exceptions=True,
        )

        # Assert
        assert sum(not isinstance(r, Exception) for r in results) == 1
        assert sum(isinstance(r, ConflictError) for r in results) == 1

    @pytest.mark.asyncio
    async def test_failed_owner_grant_rolls_back_community(self, unit_env, monkeypatch):
        """If the owner insert fails, no ownerless community is left behind."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        repo = await unit_env.get(CollaboratorRepository)

        async def failing_save(collaborator):
            raise RuntimeError("store went away")

        monkeypatch.setattr(repo, "save", failing_save)

        # Act
        with pytest.raises(RuntimeError):
            await access_control.create_community(new_user(), make_details("halfway"))

        # Assert
        assert await access_control.check_handle_availability(
            CommunityHandle("halfway")
        )

    @pytest.mark.asyncio
    async def test_ownerless_community_reported_as_inconsistency(
        self, unit_env, monkeypatch
    ):
        """A community row surviving a failed owner grant is an inconsistency."""
        # Arrange - a store that cannot roll back the community insert
        access_control = await unit_env.get(AccessControlService)
        monkeypatch.setattr(access_control, "transactions", _AutocommitTransactions())

        async def failing_create(*args, **kwargs):
            raise RuntimeError("owner insert failed")

        monkeypatch.setattr(access_control.collaborator_service, "create", failing_create)

        # Act & Assert
        with pytest.raises(InconsistencyError):
            await access_control.create_community(new_user(), make_details("orphan"))

    @pytest.mark.asyncio
    async def test_failed_rollback_check_keeps_original_error(
        self, unit_env, monkeypatch
    ):
        """If the rollback check cannot read the store, the creation error surfaces."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)

        async def failing_create(*args, **kwargs):
            raise RuntimeError("owner insert failed")

        async def failing_find(community_id):
            raise DependencyFailureError("database", "connection lost")

        monkeypatch.setattr(access_control.collaborator_service, "create", failing_create)
        monkeypatch.setattr(access_control.community_service, "find", failing_find)

        # Act & Assert
        with pytest.raises(RuntimeError, match="owner insert failed"):
            await access_control.create_community(new_user(), make_details("blind"))


class TestRequestJoin:
    """Tests for request_join method."""

    @pytest.mark.asyncio
    async def test_testcorp_join_scenario(self, unit_env):
        """Joining creates a pending viewer without access until approved."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        joiner = new_user()
        community, _ = await create_community(access_control, owner_id, "testcorp")

        # Act
        collaborator = await access_control.request_join(
            joiner, CommunityHandle("testcorp")
        )

        # Assert
        assert collaborator.role == Role.VIEWER
        assert collaborator.status == CollaboratorStatus.PENDING
        assert await access_control.check_access(joiner) is False

        # Approve and re-check
        await access_control.review_collaborator(
            owner_id, community.id, joiner, approve=True
        )
        assert await access_control.check_access(joiner) is True

    @pytest.mark.asyncio
    async def test_double_join_conflicts(self, unit_env):
        """A second join request for the same pair fails and leaves one row."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        community, _ = await create_community(access_control)
        joiner = new_user()
        await access_control.request_join(joiner, CommunityHandle("testcorp"))

        # Act & Assert
        with pytest.raises(ConflictError):
            await access_control.request_join(joiner, CommunityHandle("testcorp"))

        rows = await access_control.collaborator_service.list_for_user(joiner)
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_concurrent_double_join_creates_one_row(self, unit_env):
        """Two concurrent joins by the same user yield one row and one conflict."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        await create_community(access_control)
        joiner = new_user()

        # Act
        results = await asyncio.gather(
            access_control.request_join(joiner, CommunityHandle("testcorp")),
            access_control.request_join(joiner, CommunityHandle("testcorp")),
            return_exceptions=True,
        )

        # Assert
        assert sum(isinstance(r, ConflictError) for r in results) == 1
        rows = await access_control.collaborator_service.list_for_user(joiner)
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_unknown_handle_not_found(self, unit_env):
        """Joining a handle nobody uses should raise NotFoundError."""
        access_control = await unit_env.get(AccessControlService)

        with pytest.raises(NotFoundError):
            await access_control.request_join(new_user(), CommunityHandle("nobody"))

    @pytest.mark.asyncio
    async def test_join_publishes_event(self, unit_env):
        """Join requests are published on the event bus."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        bus = await unit_env.get(AccessEventBus)
        await create_community(access_control)
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(handler)
        joiner = new_user()

        # Act
        await access_control.request_join(joiner, CommunityHandle("testcorp"))

        # Assert
        assert [e.kind for e in received] == [AccessEventKind.JOIN_REQUESTED]
        assert received[0].user_id == joiner


class TestAuthorize:
    """Tests for authorize method."""

    @pytest.mark.asyncio
    async def test_owner_passes_owner_only(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)

        role = await access_control.authorize(owner_id, community.id, OWNER_ONLY)

        assert role == Role.OWNER

    @pytest.mark.asyncio
    async def test_viewer_forbidden_for_manager_action(self, unit_env):
        """Forbidden errors carry the required roles and the current role."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        viewer = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.add_collaborator(owner_id, viewer, community.id, Role.VIEWER)

        # Act
        with pytest.raises(ForbiddenError) as exc_info:
            await access_control.authorize(viewer, community.id, MANAGER_ROLES)

        # Assert
        assert exc_info.value.required_roles == ["admin", "owner"]
        assert exc_info.value.current_role == "viewer"
        assert exc_info.value.current_status == "approved"

    @pytest.mark.asyncio
    async def test_pending_member_forbidden(self, unit_env):
        """Pending members have no access, whatever their role."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        community, _ = await create_community(access_control)
        joiner = new_user()
        await access_control.request_join(joiner, CommunityHandle("testcorp"))

        # Act & Assert
        with pytest.raises(ForbiddenError) as exc_info:
            await access_control.authorize(joiner, community.id, ANY_ROLE)
        assert exc_info.value.current_status == "pending"

    @pytest.mark.asyncio
    async def test_stranger_forbidden(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        community, _ = await create_community(access_control)

        with pytest.raises(ForbiddenError) as exc_info:
            await access_control.authorize(new_user(), community.id, ANY_ROLE)
        assert exc_info.value.current_role is None


class TestAddCollaborator:
    """Tests for add_collaborator method."""

    @pytest.mark.asyncio
    async def test_add_approved_admin(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        target = new_user()
        community, _ = await create_community(access_control, owner_id)

        # Act
        collaborator = await access_control.add_collaborator(
            owner_id, target, community.id, Role.ADMIN
        )

        # Assert
        assert collaborator.role == Role.ADMIN
        assert collaborator.is_approved
        assert collaborator.invited_by == owner_id

    @pytest.mark.asyncio
    async def test_seat_limit_by_class(self, unit_env):
        """A full team class blocks admins but not viewers."""
        # Arrange - owner and one admin fill a two-seat team class
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)
        await use_plan(unit_env, community.id, max_team_members=2, max_viewers=10)
        await access_control.add_collaborator(
            owner_id, new_user(), community.id, Role.ADMIN
        )

        # Act & Assert - another admin does not fit
        with pytest.raises(SeatLimitExceededError) as exc_info:
            await access_control.add_collaborator(
                owner_id, new_user(), community.id, Role.ADMIN
            )
        assert exc_info.value.seat_class == "team"
        assert exc_info.value.limit == 2
        assert exc_info.value.current == 2

        # A viewer uses a different seat class
        viewer = await access_control.add_collaborator(
            owner_id, new_user(), community.id, Role.VIEWER
        )
        assert viewer.is_approved

    @pytest.mark.asyncio
    async def test_pending_grant_skips_seat_check(self, unit_env):
        """Pending rows do not consume seats."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)
        await use_plan(unit_env, community.id, max_team_members=1, max_viewers=0)

        # Act
        pending = await access_control.add_collaborator(
            owner_id,
            new_user(),
            community.id,
            Role.VIEWER,
            CollaboratorStatus.PENDING,
        )

        # Assert
        assert pending.status == CollaboratorStatus.PENDING

    @pytest.mark.asyncio
    async def test_existing_pending_row_is_approved(self, unit_env):
        """Adding someone with a pending request approves it with the new role."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        joiner = new_user()
        community, _ = await create_community(access_control, owner_id)
        pending = await access_control.request_join(joiner, CommunityHandle("testcorp"))

        # Act
        approved = await access_control.add_collaborator(
            owner_id, joiner, community.id, Role.LIMITED_ADMIN
        )

        # Assert
        assert approved.id == pending.id
        assert approved.role == Role.LIMITED_ADMIN
        assert approved.is_approved

    @pytest.mark.asyncio
    async def test_existing_approved_row_conflicts(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        target = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.add_collaborator(owner_id, target, community.id, Role.VIEWER)

        with pytest.raises(ConflictError):
            await access_control.add_collaborator(
                owner_id, target, community.id, Role.ADMIN
            )

    @pytest.mark.asyncio
    async def test_owner_role_rejected(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)

        with pytest.raises(ValidationError):
            await access_control.add_collaborator(
                owner_id, new_user(), community.id, Role.OWNER
            )

    @pytest.mark.asyncio
    async def test_unknown_community_not_found(self, unit_env):
        access_control = await unit_env.get(AccessControlService)

        with pytest.raises(NotFoundError):
            await access_control.add_collaborator(
                new_user(), new_user(), uuid4(), Role.VIEWER
            )

    @pytest.mark.asyncio
    async def test_concurrent_grants_never_exceed_limit(self, unit_env):
        """Serialized seat grants never over-allocate."""
        # Arrange - owner takes one of three team seats
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)
        await use_plan(unit_env, community.id, max_team_members=3, max_viewers=10)

        # Act
        results = await asyncio.gather(
            *(
                access_control.add_collaborator(
                    owner_id, new_user(), community.id, Role.ADMIN
                )
                for _ in range(6)
            ),
            return_exceptions=True,
        )

        # Assert
        granted = [r for r in results if not isinstance(r, Exception)]
        assert len(granted) == 2
        assert all(
            isinstance(r, SeatLimitExceededError)
            for r in results
            if isinstance(r, Exception)
        )
        assert await access_control.collaborator_service.count_seats(
            community.id, Role.ADMIN.seat_class
        ) == 3

    @pytest.mark.asyncio
    async def test_approval_waiting_for_seat_lock_loses_to_reject(self, unit_env):
        """A reject committed while an approval waits for the lock stays rejected."""
        # Arrange - a request holds the community lock
        access_control = await unit_env.get(AccessControlService)
        transactions = await unit_env.get(TransactionManager)
        owner_id = new_user()
        joiner = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.request_join(joiner, CommunityHandle("testcorp"))

        lock_held = asyncio.Event()
        release = asyncio.Event()

        async def hold_lock():
            async with transactions.atomic():
                await transactions.lock_community(community.id)
                lock_held.set()
                await release.wait()

        holder = asyncio.create_task(hold_lock())
        await lock_held.wait()

        # Act - the approval reads the pending row, then blocks on the lock
        approval = asyncio.create_task(
            access_control.review_collaborator(
                owner_id, community.id, joiner, approve=True
            )
        )
        for _ in range(5):
            await asyncio.sleep(0)
        rejected = await access_control.review_collaborator(
            owner_id, community.id, joiner, approve=False
        )
        release.set()
        await holder

        # Assert
        assert rejected.status == CollaboratorStatus.REJECTED
        with pytest.raises(InvalidTransitionError):
            await approval
        final = await access_control.collaborator_service.get_membership(
            joiner, community.id
        )
        assert final.status == CollaboratorStatus.REJECTED
        assert final.joined_at is None
        assert await access_control.check_access(joiner) is False


class TestUpdateCollaborator:
    """Tests for review, role change and removal."""

    @pytest.mark.asyncio
    async def test_reject_pending_request(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        joiner = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.request_join(joiner, CommunityHandle("testcorp"))

        # Act
        rejected = await access_control.review_collaborator(
            owner_id, community.id, joiner, approve=False
        )

        # Assert
        assert rejected.status == CollaboratorStatus.REJECTED
        assert await access_control.check_access(joiner) is False

    @pytest.mark.asyncio
    async def test_rejected_cannot_be_approved(self, unit_env):
        """Rejection is terminal."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        joiner = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.request_join(joiner, CommunityHandle("testcorp"))
        await access_control.review_collaborator(
            owner_id, community.id, joiner, approve=False
        )

        # Act & Assert
        with pytest.raises(InvalidTransitionError) as exc_info:
            await access_control.review_collaborator(
                owner_id, community.id, joiner, approve=True
            )
        assert exc_info.value.current == "rejected"

    @pytest.mark.asyncio
    async def test_approve_with_role(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        joiner = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.request_join(joiner, CommunityHandle("testcorp"))

        # Act
        approved = await access_control.review_collaborator(
            owner_id, community.id, joiner, approve=True, role=Role.ADMIN
        )

        # Assert
        assert approved.role == Role.ADMIN
        assert approved.is_approved

    @pytest.mark.asyncio
    async def test_approval_blocked_when_viewers_full(self, unit_env):
        """Approving a viewer needs a free viewer seat."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        joiner = new_user()
        community, _ = await create_community(access_control, owner_id)
        await use_plan(unit_env, community.id, max_team_members=5, max_viewers=0)
        await access_control.request_join(joiner, CommunityHandle("testcorp"))

        # Act & Assert
        with pytest.raises(SeatLimitExceededError):
            await access_control.review_collaborator(
                owner_id, community.id, joiner, approve=True
            )
        pending = await access_control.collaborator_service.get_membership(
            joiner, community.id
        )
        assert pending.status == CollaboratorStatus.PENDING

    @pytest.mark.asyncio
    async def test_change_role_of_pending_member_invalid(self, unit_env):
        """Roles only change while approved."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        joiner = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.request_join(joiner, CommunityHandle("testcorp"))

        # Act & Assert
        with pytest.raises(InvalidTransitionError):
            await access_control.change_role(
                owner_id, community.id, joiner, Role.ADMIN
            )

    @pytest.mark.asyncio
    async def test_change_role_to_owner_rejected(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        member = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.add_collaborator(owner_id, member, community.id, Role.ADMIN)

        with pytest.raises(ValidationError):
            await access_control.change_role(owner_id, community.id, member, Role.OWNER)

    @pytest.mark.asyncio
    async def test_owner_role_cannot_be_changed(self, unit_env):
        """An admin cannot demote the owner."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        admin = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.add_collaborator(owner_id, admin, community.id, Role.ADMIN)

        # Act & Assert
        with pytest.raises(ConflictError):
            await access_control.change_role(admin, community.id, owner_id, Role.VIEWER)

    @pytest.mark.asyncio
    async def test_promotion_checks_team_seats(self, unit_env):
        """Moving a viewer to a team role needs a team seat."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        viewer = new_user()
        community, _ = await create_community(access_control, owner_id)
        await use_plan(unit_env, community.id, max_team_members=1, max_viewers=10)
        await access_control.add_collaborator(owner_id, viewer, community.id, Role.VIEWER)

        # Act & Assert
        with pytest.raises(SeatLimitExceededError):
            await access_control.change_role(owner_id, community.id, viewer, Role.ADMIN)

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)

        with pytest.raises(ValidationError):
            await access_control.update_collaborator(
                owner_id, community.id, new_user(), CollaboratorUpdate()
            )

    @pytest.mark.asyncio
    async def test_member_can_leave(self, unit_env):
        """Members may remove themselves without a manager role."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        viewer = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.add_collaborator(owner_id, viewer, community.id, Role.VIEWER)

        # Act
        await access_control.remove_collaborator(viewer, community.id, viewer)

        # Assert
        assert await access_control.check_access(viewer) is False

    @pytest.mark.asyncio
    async def test_viewer_cannot_remove_others(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        viewer = new_user()
        other = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.add_collaborator(owner_id, viewer, community.id, Role.VIEWER)
        await access_control.add_collaborator(owner_id, other, community.id, Role.VIEWER)

        with pytest.raises(ForbiddenError):
            await access_control.remove_collaborator(viewer, community.id, other)

    @pytest.mark.asyncio
    async def test_owner_cannot_be_removed(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)

        with pytest.raises(ConflictError):
            await access_control.remove_collaborator(owner_id, community.id, owner_id)


class TestTransferOwnership:
    """Tests for transfer_ownership method."""

    @pytest.mark.asyncio
    async def test_transfer_swaps_roles(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        community_service = await unit_env.get(CommunityService)
        owner_id = new_user()
        admin = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.add_collaborator(owner_id, admin, community.id, Role.ADMIN)

        # Act
        new_owner, previous = await access_control.transfer_ownership(
            owner_id, community.id, admin
        )

        # Assert
        assert new_owner.user_id == admin
        assert new_owner.role == Role.OWNER
        assert previous.user_id == owner_id
        assert previous.role == Role.ADMIN
        refreshed = await community_service.get_by_id(community.id)
        assert refreshed.owner_id == admin

        collaborators = await access_control.list_collaborators(admin, community.id)
        assert [c.user_id for c in collaborators if c.role == Role.OWNER] == [admin]

    @pytest.mark.asyncio
    async def test_only_owner_can_transfer(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        admin = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.add_collaborator(owner_id, admin, community.id, Role.ADMIN)

        with pytest.raises(ForbiddenError):
            await access_control.transfer_ownership(admin, community.id, admin)

    @pytest.mark.asyncio
    async def test_pending_target_rejected(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        joiner = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.request_join(joiner, CommunityHandle("testcorp"))

        with pytest.raises(InvalidTransitionError):
            await access_control.transfer_ownership(owner_id, community.id, joiner)


class TestCommunityManagement:
    """Tests for update, delete and access state."""

    @pytest.mark.asyncio
    async def test_update_community_handle(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id)

        # Act
        updated = await access_control.update_community(
            owner_id,
            community.id,
            CommunityUpdate(handle=CommunityHandle("newcorp"), city="Dublin"),
        )

        # Assert
        assert updated.handle.root == "newcorp"
        assert updated.city == "Dublin"
        assert updated.name == community.name
        assert await access_control.check_handle_availability(CommunityHandle("testcorp"))

    @pytest.mark.asyncio
    async def test_update_to_taken_handle_conflicts(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        community, _ = await create_community(access_control, owner_id, "first")
        await create_community(access_control, handle="second")

        with pytest.raises(ConflictError):
            await access_control.update_community(
                owner_id, community.id, CommunityUpdate(handle=CommunityHandle("second"))
            )

    @pytest.mark.asyncio
    async def test_delete_cascades_memberships(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        viewer = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.add_collaborator(owner_id, viewer, community.id, Role.VIEWER)

        # Act
        await access_control.delete_community(owner_id, community.id)

        # Assert
        assert await access_control.check_access(owner_id) is False
        assert await access_control.check_access(viewer) is False

    @pytest.mark.asyncio
    async def test_admin_cannot_delete(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        owner_id = new_user()
        admin = new_user()
        community, _ = await create_community(access_control, owner_id)
        await access_control.add_collaborator(owner_id, admin, community.id, Role.ADMIN)

        with pytest.raises(ForbiddenError):
            await access_control.delete_community(admin, community.id)

    @pytest.mark.asyncio
    async def test_access_state(self, unit_env):
        """Access state lists every membership and overall access."""
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        user = new_user()
        await create_community(access_control, user, "mine")
        await create_community(access_control, handle="theirs")
        await access_control.request_join(user, CommunityHandle("theirs"))

        # Act
        state = await access_control.access_state(user)

        # Assert
        assert state.has_access is True
        by_handle = {m.handle.root: m for m in state.memberships}
        assert by_handle["mine"].role == Role.OWNER
        assert by_handle["theirs"].status == CollaboratorStatus.PENDING
