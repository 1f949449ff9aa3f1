"""Collaborator entity: a (user, community) membership."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from rolo.domain.model.common import DomainModel, UpdateModel
from rolo.domain.value import (
    CollaboratorId,
    CollaboratorStatus,
    CommunityId,
    Role,
    UserId,
)
from rolo.util.clock import utcnow


class Collaborator(DomainModel):
    """Membership of a user in a community.

    Business rules:
    - Unique per (user_id, community_id)
    - Status moves pending -> approved or pending -> rejected, never back
    - Role may only change while approved
    - Only approved collaborators consume seats
    """

    id: CollaboratorId
    user_id: UserId
    community_id: CommunityId
    role: Role
    status: CollaboratorStatus = CollaboratorStatus.PENDING
    invited_by: Optional[UserId] = None
    joined_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_approved(self) -> bool:
        return self.status == CollaboratorStatus.APPROVED

    @property
    def is_owner(self) -> bool:
        return self.role == Role.OWNER


class CollaboratorUpdate(UpdateModel):
    """Partial update of a collaborator (review decision and/or new role)."""

    status: Optional[CollaboratorStatus] = None
    role: Optional[Role] = None
