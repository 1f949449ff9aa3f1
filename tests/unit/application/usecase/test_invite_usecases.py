"""Unit tests for invite use cases."""

from datetime import timedelta

import pytest

from rolo.adapter.email import MockNotifier
from rolo.application.usecase.invite import (
    AcceptInviteRequest,
    AcceptInviteUseCase,
    ExpireInvitesRequest,
    ExpireInvitesUseCase,
    ListInvitesRequest,
    ListInvitesUseCase,
    SendInviteRequest,
    SendInviteUseCase,
    ValidateInviteRequest,
    ValidateInviteUseCase,
)
from rolo.domain.error import ForbiddenError, NotFoundError
from rolo.domain.model import InviteValidity
from rolo.domain.service import AccessControlService
from rolo.domain.value import CollaboratorStatus, InviteStatus, Role
from rolo.util.clock import utcnow
from tests.harness import create_env_fixture
from tests.helpers import create_community, new_user

unit_env = create_env_fixture()


def token_from(invite_url: str) -> str:
    return invite_url.rsplit("token=", 1)[1]


class TestSendInviteUseCase:
    @pytest.mark.asyncio
    async def test_owner_sends_invite(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        send_use_case = await unit_env.get(SendInviteUseCase)
        notifier = await unit_env.get(MockNotifier)
        owner = new_user()
        community, _ = await create_community(access_control, owner)

        # Act
        invite = await send_use_case.execute(
            SendInviteRequest(
                inviter_id=str(owner),
                community_id=str(community.id),
                email="new@example.com",
                role=Role.ADMIN,
            )
        )

        # Assert
        assert invite.status == InviteStatus.PENDING
        assert invite.email_sent is True
        assert invite.invite_url.startswith("http://localhost:3000/invites/accept?token=")
        assert notifier.sent[0].subject == "You're invited to join Testcorp on Rolo"

    @pytest.mark.asyncio
    async def test_email_failure_keeps_invite(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        send_use_case = await unit_env.get(SendInviteUseCase)
        list_use_case = await unit_env.get(ListInvitesUseCase)
        notifier = await unit_env.get(MockNotifier)
        notifier.failing_emails.add("down@example.com")
        owner = new_user()
        community, _ = await create_community(access_control, owner)

        # Act
        invite = await send_use_case.execute(
            SendInviteRequest(
                inviter_id=str(owner),
                community_id=str(community.id),
                email="down@example.com",
            )
        )

        # Assert
        assert invite.email_sent is False
        listed = await list_use_case.execute(
            ListInvitesRequest(user_id=str(owner), community_id=str(community.id))
        )
        assert [i.invite_id for i in listed.invites] == [invite.invite_id]

    @pytest.mark.asyncio
    async def test_viewer_cannot_invite(self, unit_env):
        access_control = await unit_env.get(AccessControlService)
        send_use_case = await unit_env.get(SendInviteUseCase)
        owner = new_user()
        viewer = new_user()
        community, _ = await create_community(access_control, owner)
        await access_control.add_collaborator(owner, viewer, community.id, Role.VIEWER)

        with pytest.raises(ForbiddenError):
            await send_use_case.execute(
                SendInviteRequest(
                    inviter_id=str(viewer),
                    community_id=str(community.id),
                    email="new@example.com",
                )
            )


class TestAcceptAndValidate:
    @pytest.mark.asyncio
    async def test_validate_then_accept(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        send_use_case = await unit_env.get(SendInviteUseCase)
        validate_use_case = await unit_env.get(ValidateInviteUseCase)
        accept_use_case = await unit_env.get(AcceptInviteUseCase)
        owner = new_user()
        invitee = new_user()
        community, _ = await create_community(access_control, owner)
        invite = await send_use_case.execute(
            SendInviteRequest(
                inviter_id=str(owner),
                community_id=str(community.id),
                email="new@example.com",
                role=Role.LIMITED_ADMIN,
            )
        )
        token = token_from(invite.invite_url)

        # Act
        validation = await validate_use_case.execute(ValidateInviteRequest(token=token))
        accepted = await accept_use_case.execute(
            AcceptInviteRequest(user_id=str(invitee), token=token)
        )
        revalidation = await validate_use_case.execute(ValidateInviteRequest(token=token))

        # Assert
        assert validation.valid is True
        assert validation.community_handle == "testcorp"
        assert validation.role == Role.LIMITED_ADMIN
        assert accepted.community_handle == "testcorp"
        assert accepted.collaborator.role == Role.LIMITED_ADMIN
        assert accepted.collaborator.status == CollaboratorStatus.APPROVED
        assert revalidation.valid is False
        assert revalidation.status == InviteValidity.ACCEPTED
        assert revalidation.message == "Invite has already been accepted"

    @pytest.mark.asyncio
    async def test_accept_unknown_token(self, unit_env):
        accept_use_case = await unit_env.get(AcceptInviteUseCase)

        with pytest.raises(NotFoundError):
            await accept_use_case.execute(
                AcceptInviteRequest(user_id=str(new_user()), token="unknown")
            )

    @pytest.mark.asyncio
    async def test_validate_unknown_token(self, unit_env):
        validate_use_case = await unit_env.get(ValidateInviteUseCase)

        response = await validate_use_case.execute(ValidateInviteRequest(token="unknown"))

        assert response.valid is False
        assert response.status == InviteValidity.NOT_FOUND


class TestExpireInvitesUseCase:
    @pytest.mark.asyncio
    async def test_expires_invites_as_of_given_time(self, unit_env):
        # Arrange
        access_control = await unit_env.get(AccessControlService)
        send_use_case = await unit_env.get(SendInviteUseCase)
        expire_use_case = await unit_env.get(ExpireInvitesUseCase)
        owner = new_user()
        community, _ = await create_community(access_control, owner)
        await send_use_case.execute(
            SendInviteRequest(
                inviter_id=str(owner),
                community_id=str(community.id),
                email="new@example.com",
            )
        )

        # Act
        today = await expire_use_case.execute(ExpireInvitesRequest())
        next_week = await expire_use_case.execute(
            ExpireInvitesRequest(now=utcnow() + timedelta(days=8))
        )

        # Assert
        assert today.expired == 0
        assert next_week.expired == 1
