"""Seat limit enforcement."""

import logfire

from rolo.domain.error import SeatLimitExceededError
from rolo.domain.model import SubscriptionUsage
from rolo.domain.value import CommunityId, SeatClass

from .base import Service
from .collaborator_service import CollaboratorService
from .subscription_service import SubscriptionService


class SeatLimitService(Service):
    """Decides whether a team or viewer seat may be added to a community.

    Counts are taken at grant time; nothing is reserved ahead. Callers that
    need a strict bound hold TransactionManager.lock_community around the
    check and the grant.
    """

    def __init__(
        self,
        collaborator_service: CollaboratorService,
        subscription_service: SubscriptionService,
    ) -> None:
        self.collaborator_service = collaborator_service
        self.subscription_service = subscription_service

    async def can_add(self, community_id: CommunityId, seat_class: SeatClass) -> bool:
        """Whether one more approved collaborator of the class fits the plan."""
        limits, _ = await self.subscription_service.effective_limits(community_id)
        current = await self.collaborator_service.count_seats(community_id, seat_class)
        return limits.has_room(seat_class, current)

    async def ensure_can_add(
        self, community_id: CommunityId, seat_class: SeatClass
    ) -> None:
        """Raise SeatLimitExceededError if the class is full."""
        with logfire.span(
            "seat_limit_service.ensure_can_add",
            community_id=str(community_id),
            seat_class=seat_class.value,
        ):
            limits, _ = await self.subscription_service.effective_limits(community_id)
            current = await self.collaborator_service.count_seats(
                community_id, seat_class
            )
            if not limits.has_room(seat_class, current):
                limit = limits.limit_for(seat_class)
                logfire.warn(
                    "Seat limit reached",
                    community_id=str(community_id),
                    seat_class=seat_class.value,
                    plan=limits.plan_name,
                    limit=limit,
                    current=current,
                )
                raise SeatLimitExceededError(
                    str(community_id), seat_class.value, limit, current
                )

    async def usage(self, community_id: CommunityId) -> SubscriptionUsage:
        """Compute seat usage from approved collaborators."""
        limits, status = await self.subscription_service.effective_limits(community_id)
        team = await self.collaborator_service.count_seats(community_id, SeatClass.TEAM)
        viewers = await self.collaborator_service.count_seats(
            community_id, SeatClass.VIEWER
        )
        return SubscriptionUsage(
            community_id=community_id,
            plan_name=limits.plan_name,
            status=status,
            team_members=team,
            viewers=viewers,
            max_team_members=limits.max_team_members,
            max_viewers=limits.max_viewers,
        )
