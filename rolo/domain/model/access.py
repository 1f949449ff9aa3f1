"""Access state and access events.

AccessState is returned to callers instead of being held between calls; the
services themselves keep no state outside the store.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from rolo.domain.model.common import DomainModel
from rolo.domain.value import (
    CollaboratorStatus,
    CommunityHandle,
    CommunityId,
    Role,
    UserId,
)
from rolo.util.clock import utcnow


class Membership(DomainModel):
    """One community membership of a user."""

    community_id: CommunityId
    handle: CommunityHandle
    name: str
    role: Role
    status: CollaboratorStatus


class AccessState(DomainModel):
    """Snapshot of what a user can reach, computed per call."""

    user_id: UserId
    has_access: bool
    memberships: list[Membership] = Field(default_factory=list)


class AccessEventKind(str, Enum):
    """Membership changes published on the access event bus."""

    JOIN_REQUESTED = "join_requested"
    COLLABORATOR_ADDED = "collaborator_added"
    COLLABORATOR_APPROVED = "collaborator_approved"
    COLLABORATOR_REJECTED = "collaborator_rejected"
    ROLE_CHANGED = "role_changed"
    COLLABORATOR_REMOVED = "collaborator_removed"
    OWNERSHIP_TRANSFERRED = "ownership_transferred"
    INVITE_ACCEPTED = "invite_accepted"


class AccessEvent(DomainModel):
    """A membership change, delivered at most once to each subscriber."""

    kind: AccessEventKind
    community_id: CommunityId
    user_id: UserId
    actor_id: Optional[UserId] = None
    role: Optional[Role] = None
    status: Optional[CollaboratorStatus] = None
    occurred_at: datetime = Field(default_factory=utcnow)
