"""In-memory invite repository for testing."""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from rolo.domain.model import Invite
from rolo.domain.repository import InviteRepository
from rolo.domain.value import (
    CommunityId,
    EmailAddress,
    InviteId,
    InviteStatus,
    InviteToken,
    UserId,
)

from .database import InMemoryDatabase


class InMemoryInviteRepository(InviteRepository):
    """In-memory implementation of InviteRepository for testing."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.db = database

    async def find_by_id(self, invite_id: InviteId) -> Optional[Invite]:
        """Find an invite by ID."""
        return self.db.invites.get(invite_id)

    async def find_by_token(self, token: InviteToken) -> Optional[Invite]:
        """Find an invite by its token."""
        for invite in self.db.invites.values():
            if invite.token == token:
                return invite
        return None

    async def find_by_community(
        self,
        community_id: CommunityId,
        status: Optional[InviteStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invite]:
        """Find invites of a community with pagination."""
        matches = [
            invite
            for invite in self.db.invites.values()
            if invite.community_id == community_id
            and (status is None or invite.status == status)
        ]

        # Sort by created_at descending
        matches.sort(key=lambda inv: inv.created_at, reverse=True)

        # Apply pagination
        return matches[offset : offset + limit]

    async def exists_pending_for_email(
        self, community_id: CommunityId, email: EmailAddress, now: datetime
    ) -> bool:
        return any(
            invite.community_id == community_id
            and invite.email == email
            and invite.is_redeemable(now)
            for invite in self.db.invites.values()
        )

    async def save(self, invite: Invite) -> Invite:
        """Save an invite (create or update).

        Raises:
            IntegrityError: If another invite uses the token
        """
        existing = await self.find_by_token(invite.token)
        if existing and existing.id != invite.id:
            raise IntegrityError("Duplicate invite token", None, Exception())

        self.db.put(self.db.invites, invite.id, invite)
        return invite

    async def mark_accepted(
        self, invite_id: InviteId, user_id: UserId, accepted_at: datetime
    ) -> Optional[Invite]:
        invite = self.db.invites.get(invite_id)
        if not invite or invite.status != InviteStatus.PENDING:
            return None

        accepted = invite.model_copy(
            update={
                "status": InviteStatus.ACCEPTED,
                "accepted_at": accepted_at,
                "accepted_by_user_id": user_id,
            }
        )
        self.db.put(self.db.invites, invite_id, accepted)
        return accepted

    async def expire_stale(self, now: datetime) -> int:
        expired = 0
        for invite in list(self.db.invites.values()):
            if invite.status == InviteStatus.PENDING and invite.is_expired(now):
                self.db.put(
                    self.db.invites,
                    invite.id,
                    invite.model_copy(update={"status": InviteStatus.EXPIRED}),
                )
                expired += 1
        return expired
