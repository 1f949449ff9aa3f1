"""Invite entity.

Invites grant a role in a community to whoever redeems the token before it
expires. A token can be accepted at most once.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from rolo.domain.model.common import DomainModel
from rolo.domain.value import (
    CommunityId,
    EmailAddress,
    InviteId,
    InviteStatus,
    InviteToken,
    Role,
    UserId,
)
from rolo.util.clock import utcnow


class Invite(DomainModel):
    """Invite entity.

    Business rules:
    - One pending invite per (community, email)
    - Expires a fixed number of days after creation (7 by default)
    - Redeemable only while pending and before expires_at, whatever a
      background sweep has or has not marked
    - pending -> accepted is irreversible
    """

    id: InviteId
    community_id: CommunityId
    email: EmailAddress
    role: Role
    token: InviteToken
    status: InviteStatus = InviteStatus.PENDING
    invited_by: UserId
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    accepted_by_user_id: Optional[UserId] = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_redeemable(self, now: datetime) -> bool:
        return self.status == InviteStatus.PENDING and not self.is_expired(now)


class InviteValidity(str, Enum):
    """Outcome of checking an invite token without redeeming it."""

    VALID = "valid"
    NOT_FOUND = "not_found"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
