"""Shared test helpers for building communities and users."""

from decimal import Decimal
from uuid import uuid4

from dishka import AsyncContainer

from rolo.adapter.identity import MockIdentityVerifier
from rolo.domain.model import (
    Collaborator,
    Community,
    CommunityDetails,
    SubscriptionPlan,
)
from rolo.domain.repository import SubscriptionRepository
from rolo.domain.service import AccessControlService, SubscriptionService
from rolo.domain.value import (
    CommunityHandle,
    CommunityId,
    EmailAddress,
    PhoneNumber,
    PlanId,
    UserId,
)


def new_user() -> UserId:
    """A fresh identity provider user id."""
    return UserId(uuid4())


def make_details(handle: str = "testcorp", name: str | None = None) -> CommunityDetails:
    """Valid community details for tests.

    Args:
        handle: Community handle
        name: Display name, derived from the handle if omitted
    """
    return CommunityDetails(
        handle=CommunityHandle(handle),
        name=name or handle.replace("-", " ").title(),
        email=EmailAddress(f"hello@{handle}.example.com"),
        phone_number=PhoneNumber("+1 555 0100"),
    )


async def create_community(
    access_control: AccessControlService,
    owner_id: UserId | None = None,
    handle: str = "testcorp",
) -> tuple[Community, Collaborator]:
    """Create a community owned by ``owner_id`` (a new user if omitted)."""
    return await access_control.create_community(
        owner_id or new_user(), make_details(handle)
    )


async def use_plan(
    env: AsyncContainer,
    community_id: CommunityId,
    max_team_members: int,
    max_viewers: int,
) -> SubscriptionPlan:
    """Move a community onto a new paid plan with the given seat limits."""
    repository = await env.get(SubscriptionRepository)
    subscription_service = await env.get(SubscriptionService)
    plan = await repository.save_plan(
        SubscriptionPlan(
            id=PlanId(uuid4()),
            name=f"custom-{uuid4().hex[:8]}",
            display_name="Custom",
            price_monthly=Decimal("9.00"),
            price_yearly=Decimal("90.00"),
            max_team_members=max_team_members,
            max_viewers=max_viewers,
        )
    )
    await subscription_service.change_plan(community_id, plan.name)
    return plan


def auth_header(user_id: UserId) -> dict[str, str]:
    """Authorization header accepted by the mock identity verifier."""
    return {"Authorization": f"Bearer {MockIdentityVerifier.token_for(user_id)}"}


def community_payload(handle: str = "testcorp", **overrides) -> dict:
    """JSON body for ``POST /communities``."""
    payload = {
        "handle": handle,
        "name": handle.replace("-", " ").title(),
        "email": f"hello@{handle}.example.com",
        "phone_number": "+1 555 0100",
    }
    payload.update(overrides)
    return payload
